"""Reward claiming"""
import logging
from typing import Iterable, Optional
from .distribute_reward import distribute_borrower_reward, distribute_supplier_reward
from .update_reward_index import update_borrow_index, update_supply_index
from ..state.protocol_context import ProtocolContext
from ..errors import ProtocolError

logger = logging.getLogger(__name__)

def claim_reward(
    ctx: ProtocolContext,
    holder: str,
    markets: Optional[Iterable[str]] = None,
    borrowers: bool = True,
    suppliers: bool = True
) -> int:
    """Checkpoint the holder in `markets` and pay out everything accrued.

    `markets` defaults to every listed market. Whatever the
    treasury cannot pay stays accrued. Returns the amount paid.
    """
    if ctx.treasury is None:
        raise ProtocolError("no reward treasury configured")

    with ctx.store.atomic():
        store = ctx.store
        if markets is None:
            market_ids = [market for market, record in store.markets.items() if record.is_listed]
        else:
            market_ids = list(markets)
        for market in market_ids:
            store.listed_market(market)
            if borrowers:
                market_borrow_index = ctx.market_data.borrow_index(market)
                update_borrow_index(ctx, market, market_borrow_index)
                distribute_borrower_reward(ctx, market, holder, market_borrow_index)
            if suppliers:
                update_supply_index(ctx, market)
                distribute_supplier_reward(ctx, market, holder)

        accrued = store.accrued(holder)
        remaining = ctx.treasury.grant(holder, accrued) if accrued else 0
        store.set_accrued(holder, remaining)

    paid = accrued - remaining
    logger.info("%s claimed %d reward, %d left accrued", holder, paid, remaining)
    return paid
