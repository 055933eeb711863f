"""Decision making for computer seats."""

from blackjack.strategy.rules import HouseRules
from blackjack.strategy.play import Action, SkillTier, StrategyEngine
from blackjack.strategy.betting import BetEngine, Outcome

__all__ = [
    "HouseRules",
    "Action",
    "SkillTier",
    "StrategyEngine",
    "BetEngine",
    "Outcome",
]
