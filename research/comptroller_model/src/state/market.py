"""Market listing and risk parameter state"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Set
from ..constants import (
    DEFAULT_COLLATERAL_FACTOR,
    DEFAULT_BORROW_CAP,
    DEFAULT_SUPPLY_CAP
)

class Action(Enum):
    """Market actions that can be paused by an admin"""
    MINT = "mint"
    REDEEM = "redeem"
    BORROW = "borrow"
    REPAY = "repay"
    ENTER_MARKET = "enter_market"

@dataclass
class Market:
    """Represents a listed lending market"""
    market_id: str
    is_listed: bool = False
    collateral_factor: int = DEFAULT_COLLATERAL_FACTOR  # Exp mantissa
    account_membership: Dict[str, bool] = field(default_factory=dict)
    paused_actions: Set[Action] = field(default_factory=set)
    borrow_cap: int = DEFAULT_BORROW_CAP
    supply_cap: int = DEFAULT_SUPPLY_CAP

    def is_member(self, account: str) -> bool:
        """Check whether the account counts this market as collateral"""
        return self.account_membership.get(account, False)

    def is_paused(self, action: Action) -> bool:
        return action in self.paused_actions

    def set_paused(self, action: Action, paused: bool) -> None:
        if paused:
            self.paused_actions.add(action)
        else:
            self.paused_actions.discard(action)
