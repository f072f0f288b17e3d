"""Protocol context: the accounting store plus the collaborators it reads from"""
from dataclasses import dataclass, field
from typing import Optional
from .accounting_store import AccountingStore
from ..errors import PriceError
from ..exponential import safe32
from ..interfaces import (
    AccessGate,
    BlockSource,
    LiquidityLens,
    MarketDataSource,
    PriceOracle,
    RewardTreasury
)

@dataclass
class ProtocolContext:
    """Handle passed into every comptroller operation"""
    market_data: MarketDataSource
    oracle: PriceOracle
    blocks: BlockSource
    lens: LiquidityLens
    store: AccountingStore = field(default_factory=AccountingStore)
    treasury: Optional[RewardTreasury] = None
    access_gate: Optional[AccessGate] = None

    def block_number(self) -> int:
        """Current block height, which must fit in 32 bits"""
        return safe32(self.blocks.current_block(), "block number exceeds 32 bits")

    def price_of(self, market: str) -> int:
        """Oracle price of a market's underlying, raising if unavailable"""
        price = self.oracle.underlying_price(market)
        if price == 0:
            raise PriceError(f"No price for market {market}")
        return price
