"""Reward index state management"""
from dataclasses import dataclass, replace
from enum import Enum
from ..constants import REWARD_INITIAL_INDEX

class RewardSide(Enum):
    SUPPLY = "supply"
    BORROW = "borrow"

@dataclass(frozen=True)
class MarketRewardState:
    """Cumulative reward index of one market side.

    Frozen so that index and block are always replaced together.
    """
    index: int = 0  # Double mantissa, fits 224 bits
    block: int = 0  # fits 32 bits

    def advance(self, index: int, block: int) -> "MarketRewardState":
        """Return the state moved to a new index and block"""
        return replace(self, index=index, block=block)

    def is_initialized(self) -> bool:
        return self.index != 0 or self.block != 0

def initial_reward_state(block: int) -> MarketRewardState:
    """State of a market side whose rewards start at `block`"""
    return MarketRewardState(index=REWARD_INITIAL_INDEX, block=block)
