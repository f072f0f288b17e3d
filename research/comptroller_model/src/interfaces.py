"""Collaborators consumed by the comptroller core.

Token mechanics, interest rate models, price feeds and access control live
outside the core. The core only reads through these interfaces.
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

class MarketDataSource(ABC):
    """Stored (not recomputed) market and account balances"""

    @abstractmethod
    def total_supply(self, market: str) -> int: ...

    @abstractmethod
    def total_borrows(self, market: str) -> int: ...

    @abstractmethod
    def account_token_balance(self, market: str, account: str) -> int: ...

    @abstractmethod
    def account_stored_borrow_balance(self, market: str, account: str) -> int: ...

    @abstractmethod
    def borrow_index(self, market: str) -> int:
        """Market borrow index, Exp mantissa"""

    @abstractmethod
    def exchange_rate_stored(self, market: str) -> int:
        """Underlying per market token, Exp mantissa"""

class PriceOracle(ABC):
    @abstractmethod
    def underlying_price(self, market: str) -> int:
        """Price of the market's underlying in the base asset, Exp mantissa. 0 means unavailable."""

class BlockSource(ABC):
    @abstractmethod
    def current_block(self) -> int: ...

class LiquidityLens(ABC):
    """Pluggable valuation of an account's hypothetical liquidity"""

    @abstractmethod
    def hypothetical_account_liquidity(
        self,
        ctx,
        account: str,
        target_market: Optional[str],
        redeem_tokens: int,
        borrow_amount: int
    ) -> Tuple[int, int]:
        """Return (surplus, shortfall). Must not mutate any state."""

class RewardTreasury(ABC):
    @abstractmethod
    def grant(self, recipient: str, amount: int) -> int:
        """Pay out up to `amount` of reward token, returning the unpaid remainder"""

class AccessGate(ABC):
    @abstractmethod
    def is_allowed(self, caller: str, action: str) -> bool: ...
