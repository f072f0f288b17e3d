"""Process wide accounting store.

Owns every mutable record of the comptroller: market listings, account market
sets, reward indices, account snapshots, reward speeds and accrued rewards.
Operations receive the store explicitly; there is no module level instance.
"""
import copy
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
from .market import Market
from .reward_state import MarketRewardState, RewardSide
from ..errors import NotListedError
from ..exponential import checked_add

@dataclass
class AccountingStore:
    markets: Dict[str, Market] = field(default_factory=dict)
    account_assets: Dict[str, List[str]] = field(default_factory=dict)
    reward_states: Dict[Tuple[str, RewardSide], MarketRewardState] = field(default_factory=dict)
    reward_speeds: Dict[Tuple[str, RewardSide], int] = field(default_factory=dict)
    account_indices: Dict[Tuple[str, RewardSide, str], int] = field(default_factory=dict)
    reward_accrued: Dict[str, int] = field(default_factory=dict)

    # Markets

    def market(self, market_id: str) -> Optional[Market]:
        return self.markets.get(market_id)

    def is_listed(self, market_id: str) -> bool:
        record = self.markets.get(market_id)
        return record is not None and record.is_listed

    def listed_market(self, market_id: str) -> Market:
        """Return the market record, raising if it is not listed"""
        record = self.markets.get(market_id)
        if record is None or not record.is_listed:
            raise NotListedError(f"Market {market_id} is not listed")
        return record

    def assets_in(self, account: str) -> Tuple[str, ...]:
        """Markets the account entered, in entry order"""
        return tuple(self.account_assets.get(account, ()))

    def check_membership(self, account: str, market_id: str) -> bool:
        record = self.markets.get(market_id)
        return record is not None and record.is_member(account)

    # Rewards

    def reward_state(self, market_id: str, side: RewardSide) -> MarketRewardState:
        """Reward state of a market side, created lazily at index 0 block 0"""
        key = (market_id, side)
        state = self.reward_states.get(key)
        if state is None:
            state = MarketRewardState()
            self.reward_states[key] = state
        return state

    def put_reward_state(self, market_id: str, side: RewardSide, state: MarketRewardState) -> None:
        self.reward_states[(market_id, side)] = state

    def reward_speed(self, market_id: str, side: RewardSide) -> int:
        return self.reward_speeds.get((market_id, side), 0)

    def account_index(self, market_id: str, side: RewardSide, account: str) -> int:
        """Index the account last reconciled against, 0 when unset"""
        return self.account_indices.get((market_id, side, account), 0)

    def set_account_index(self, market_id: str, side: RewardSide, account: str, index: int) -> None:
        self.account_indices[(market_id, side, account)] = index

    def accrued(self, account: str) -> int:
        return self.reward_accrued.get(account, 0)

    def credit_accrued(self, account: str, amount: int) -> int:
        """Add reward to an account's unclaimed balance"""
        total = checked_add(self.accrued(account), amount)
        self.reward_accrued[account] = total
        return total

    def set_accrued(self, account: str, amount: int) -> None:
        self.reward_accrued[account] = amount

    @contextmanager
    def atomic(self) -> Iterator["AccountingStore"]:
        """Run a state changing call all-or-nothing.

        On any exception every field is restored to its value on entry and
        the exception propagates.
        The snapshot deep copies the whole store, so each call costs time
        and memory proportional to every market, snapshot and membership
        record held, not just the keys the operation touches.
        """
        saved = copy.deepcopy(self.__dict__)
        try:
            yield self
        except Exception:
            self.__dict__.clear()
            self.__dict__.update(saved)
            raise
