"""In-memory collaborators standing in for markets, oracle, chain and treasury.

Used by the tests and the research simulation. The market book applies token
movements directly with no interest accrual, so the borrow index and exchange
rate only change when set explicitly.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple
from .accounting_store import AccountingStore
from .protocol_context import ProtocolContext
from ..constants import EXP_SCALE
from ..interfaces import (
    AccessGate,
    BlockSource,
    MarketDataSource,
    PriceOracle,
    RewardTreasury
)
from ..lens import StoredValuationLens

@dataclass
class BookMarket:
    total_supply: int = 0
    total_borrows: int = 0
    borrow_index: int = EXP_SCALE
    exchange_rate: int = EXP_SCALE
    balances: Dict[str, int] = field(default_factory=dict)
    borrows: Dict[str, int] = field(default_factory=dict)

class InMemoryMarketBook(MarketDataSource):
    def __init__(self):
        self.markets: Dict[str, BookMarket] = {}

    def _book(self, market: str) -> BookMarket:
        return self.markets.setdefault(market, BookMarket())

    def total_supply(self, market: str) -> int:
        return self._book(market).total_supply

    def total_borrows(self, market: str) -> int:
        return self._book(market).total_borrows

    def account_token_balance(self, market: str, account: str) -> int:
        return self._book(market).balances.get(account, 0)

    def account_stored_borrow_balance(self, market: str, account: str) -> int:
        return self._book(market).borrows.get(account, 0)

    def borrow_index(self, market: str) -> int:
        return self._book(market).borrow_index

    def exchange_rate_stored(self, market: str) -> int:
        return self._book(market).exchange_rate

    def set_exchange_rate(self, market: str, exchange_rate: int) -> None:
        self._book(market).exchange_rate = exchange_rate

    def set_borrow_index(self, market: str, borrow_index: int) -> None:
        self._book(market).borrow_index = borrow_index

    def mint(self, market: str, account: str, tokens: int) -> None:
        book = self._book(market)
        book.balances[account] = book.balances.get(account, 0) + tokens
        book.total_supply += tokens

    def redeem(self, market: str, account: str, tokens: int) -> None:
        book = self._book(market)
        balance = book.balances.get(account, 0)
        if tokens > balance:
            raise ValueError("Insufficient token balance")
        book.balances[account] = balance - tokens
        book.total_supply -= tokens

    def borrow(self, market: str, account: str, amount: int) -> None:
        book = self._book(market)
        book.borrows[account] = book.borrows.get(account, 0) + amount
        book.total_borrows += amount

    def repay(self, market: str, account: str, amount: int) -> None:
        book = self._book(market)
        debt = book.borrows.get(account, 0)
        if amount > debt:
            raise ValueError("Repay exceeds debt")
        book.borrows[account] = debt - amount
        book.total_borrows -= amount

class StaticPriceOracle(PriceOracle):
    def __init__(self, prices: Optional[Dict[str, int]] = None):
        self.prices: Dict[str, int] = dict(prices or {})

    def set_price(self, market: str, price: int) -> None:
        self.prices[market] = price

    def underlying_price(self, market: str) -> int:
        return self.prices.get(market, 0)

class BlockCounter(BlockSource):
    def __init__(self, block: int = 0):
        self.block = block

    def advance(self, blocks: int = 1) -> int:
        self.block += blocks
        return self.block

    def current_block(self) -> int:
        return self.block

class InMemoryTreasury(RewardTreasury):
    """Pays rewards from a fixed reserve; a grant larger than the reserve pays nothing"""

    def __init__(self, reserve: int = 0):
        self.reserve = reserve
        self.paid: Dict[str, int] = {}

    def grant(self, recipient: str, amount: int) -> int:
        if amount == 0 or amount > self.reserve:
            return amount
        self.reserve -= amount
        self.paid[recipient] = self.paid.get(recipient, 0) + amount
        return 0

@dataclass
class AdminGate(AccessGate):
    admins: Set[str] = field(default_factory=set)
    grants: Set[Tuple[str, str]] = field(default_factory=set)

    def is_allowed(self, caller: str, action: str) -> bool:
        return caller in self.admins or (caller, action) in self.grants

def create_simulated_protocol(
    admin: str = "admin",
    start_block: int = 1,
    treasury_reserve: int = 0
) -> Tuple[ProtocolContext, InMemoryMarketBook, StaticPriceOracle, BlockCounter]:
    """Build a context wired to fresh in-memory collaborators"""
    book = InMemoryMarketBook()
    oracle = StaticPriceOracle()
    blocks = BlockCounter(start_block)
    ctx = ProtocolContext(
        market_data=book,
        oracle=oracle,
        blocks=blocks,
        lens=StoredValuationLens(),
        store=AccountingStore(),
        treasury=InMemoryTreasury(treasury_reserve),
        access_gate=AdminGate(admins={admin})
    )
    return ctx, book, oracle, blocks
