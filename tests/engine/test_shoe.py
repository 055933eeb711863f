"""Tests for the Shoe."""

from collections import Counter
from random import Random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from blackjack.cards import Card, Rank, standard_deck
from blackjack.errors import EmptyShoe
from blackjack.shoe import Shoe


def composition(cards):
    return Counter((card.rank, card.suit) for card in cards)


class TestShoeSetup:
    """Tests for creating and shuffling a shoe."""

    def test_default_is_eight_decks(self):
        """Test the default shoe size."""
        shoe = Shoe()
        assert shoe.num_decks == 8
        assert len(shoe) == 416
        assert shoe.cards_remaining == 416
        assert shoe.running_count == 0

    def test_single_deck(self):
        """Test a single deck shoe."""
        shoe = Shoe(num_decks=1, reshuffle_below_decks=0)
        assert len(shoe) == 52

    def test_invalid_decks_raises(self):
        """Test that invalid deck count raises error."""
        with pytest.raises(ValueError):
            Shoe(num_decks=0)

    def test_invalid_reshuffle_threshold_raises(self):
        """Test the reshuffle threshold must leave cards to deal."""
        with pytest.raises(ValueError):
            Shoe(num_decks=2, reshuffle_below_decks=2)
        with pytest.raises(ValueError):
            Shoe(num_decks=2, reshuffle_below_decks=-1)

    def test_shuffle_resets_count(self, shoe):
        """Test shuffling restores the full shoe and zeroes the count."""
        drawn = [shoe.draw() for _ in range(30)]
        shoe.return_all(drawn)
        shoe.shuffle()
        assert len(shoe) == 416
        assert shoe.cards_remaining == 416
        assert shoe.running_count == 0
        assert shoe.true_count() == 0

    def test_shuffle_with_cards_out_raises(self, shoe):
        """Test the shoe refuses to shuffle while cards are dealt."""
        shoe.draw()
        with pytest.raises(ValueError):
            shoe.shuffle()

    def test_same_seed_same_order(self):
        """Test shuffles are reproducible from a seed."""
        first = Shoe(rng=Random(7))
        second = Shoe(rng=Random(7))
        assert list(first) == list(second)

    def test_draw_all_is_full_composition(self, shoe):
        """Test drawing the whole shoe yields every card num_decks times."""
        drawn = [shoe.draw() for _ in range(416)]
        expected = composition(card for _ in range(8) for card in standard_deck())
        assert composition(drawn) == expected
        assert shoe.running_count == 0


class TestDraw:
    """Tests for dealing cards."""

    def test_draw_takes_front_card(self, shoe):
        """Test draw removes the first card in order."""
        first = next(iter(shoe))
        assert shoe.draw() == first
        assert len(shoe) == 415
        assert shoe.cards_remaining == 415
        assert shoe.cards_in_play == 1

    def test_draw_updates_running_count(self, stacked_shoe):
        """Test each dealt card moves the Hi-Lo count."""
        shoe = stacked_shoe("2C", "KD", "7H", "5S")
        shoe.draw()
        assert shoe.running_count == 1
        shoe.draw()
        assert shoe.running_count == 0
        shoe.draw()
        assert shoe.running_count == 0
        shoe.draw()
        assert shoe.running_count == 1

    def test_draw_empty_raises(self):
        """Test drawing from an empty shoe fails loudly."""
        shoe = Shoe(num_decks=1, reshuffle_below_decks=0)
        for _ in range(52):
            shoe.draw()
        with pytest.raises(EmptyShoe):
            shoe.draw()

    def test_empty_shoe_is_index_error(self):
        """Test EmptyShoe can be caught as an IndexError."""
        assert issubclass(EmptyShoe, IndexError)


class TestReturnToBottom:
    """Tests for returning cards and reshuffling."""

    def test_returned_card_goes_to_bottom(self, shoe):
        """Test returned cards are dealt last."""
        card = shoe.draw()
        shoe.return_to_bottom(card)
        assert list(shoe)[-1] == card
        assert len(shoe) == 416
        assert shoe.cards_in_play == 0

    def test_returned_card_is_face_up(self, shoe):
        """Test a face-down card comes back face up."""
        card = shoe.draw()
        shoe.return_to_bottom(card.turned(False))
        assert list(shoe)[-1].face_up

    def test_return_does_not_restore_undealt_count(self, shoe):
        """Test returned cards do not count as undealt."""
        cards = [shoe.draw() for _ in range(10)]
        shoe.return_all(cards)
        assert shoe.cards_remaining == 406
        assert len(shoe) == 416

    def test_return_unknown_card_raises(self, shoe):
        """Test a card cannot come back if none were dealt."""
        with pytest.raises(ValueError):
            shoe.return_to_bottom(Card.from_string("AS"))

    def test_reshuffles_below_two_decks(self, shoe):
        """Test the shoe reshuffles once fewer than 104 undealt cards remain."""
        drawn = [shoe.draw() for _ in range(313)]
        assert shoe.cards_remaining == 103
        assert shoe.shuffle_count == 1

        shoe.return_all(drawn)

        assert shoe.shuffle_count == 2
        assert shoe.cards_remaining == 416
        assert shoe.running_count == 0

    def test_no_reshuffle_at_exactly_two_decks(self, shoe):
        """Test 104 undealt cards is still enough."""
        drawn = [shoe.draw() for _ in range(312)]
        shoe.return_all(drawn)
        assert shoe.shuffle_count == 1
        assert shoe.cards_remaining == 104

    def test_no_reshuffle_while_cards_in_play(self, shoe):
        """Test the reshuffle waits until every dealt card is back."""
        drawn = [shoe.draw() for _ in range(320)]
        shoe.return_all(drawn[:-1])
        assert shoe.shuffle_count == 1
        assert shoe.cards_in_play == 1

        shoe.return_to_bottom(drawn[-1])
        assert shoe.shuffle_count == 2

    @settings(max_examples=50, deadline=None)
    @given(st.lists(st.integers(min_value=0, max_value=12), min_size=1, max_size=60))
    def test_cards_are_conserved(self, round_sizes):
        """Test no card is created or lost across deals and returns."""
        shoe = Shoe(rng=Random(1))
        for size in round_sizes:
            out = [shoe.draw() for _ in range(size)]
            assert len(shoe) + len(out) == shoe.total_cards
            shoe.return_all(out)
            assert len(shoe) == shoe.total_cards
        assert composition(shoe) == composition(
            card for _ in range(8) for card in standard_deck()
        )


class TestTrueCount:
    """Tests for the true count."""

    def test_fresh_shoe_true_count_zero(self, shoe):
        """Test a new shoe has a true count of zero."""
        assert shoe.true_count() == 0

    def test_true_count_divides_by_decks_remaining(self, stacked_shoe):
        """Test running count is normalised by undealt decks."""
        shoe = stacked_shoe("2C", "3C", "4C", "5C", "6C", num_decks=1, reshuffle_below_decks=0)
        for _ in range(5):
            shoe.draw()
        # 5 / (47 / 52) = 5.53
        assert shoe.true_count() == 6

    def test_true_count_rounds_half_up(self, stacked_shoe):
        """Test a true count of exactly +0.5 rounds to 1."""
        low = [f"{r}{s}" for r in "23456" for s in "CDHS"] + ["2C", "3C", "4C", "5C", "6C", "2D"]
        high = [f"{r}{s}" for r in ("10", "J", "Q", "K", "A") for s in "CDHS"]
        high += ["10C", "JC", "QC", "KC", "AC"]
        shoe = stacked_shoe(*low, *high, "7C", num_decks=3, reshuffle_below_decks=0)
        for _ in range(52):
            shoe.draw()
        assert shoe.running_count == 1
        assert shoe.decks_remaining == 2
        assert shoe.true_count() == 1

    def test_negative_true_count(self, stacked_shoe):
        """Test high cards drive the true count negative."""
        shoe = stacked_shoe("KC", "KD", "KH", "KS", num_decks=1, reshuffle_below_decks=0)
        for _ in range(4):
            shoe.draw()
        # -4 / (48 / 52) = -4.33
        assert shoe.true_count() == -4

    def test_true_count_with_no_undealt_cards(self):
        """Test at least one card is assumed to remain."""
        shoe = Shoe(num_decks=1, reshuffle_below_decks=0)
        drawn = [shoe.draw() for _ in range(52)]
        assert shoe.cards_remaining == 0
        assert shoe.true_count() == 0

        two = next(card for card in drawn if card.rank == Rank.TWO)
        shoe.return_to_bottom(two)
        assert shoe.draw() == two
        assert shoe.running_count == 1
        assert shoe.true_count() == 52
