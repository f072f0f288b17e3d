"""Market reward index update logic"""
import logging
from ..state.accounting_store import AccountingStore
from ..state.protocol_context import ProtocolContext
from ..state.reward_state import MarketRewardState, RewardSide
from ..errors import InvalidParameterError, RangeError
from ..exponential import (
    Double,
    Exp,
    add_double,
    checked_mul,
    div_uint_exp,
    fraction,
    safe32
)

logger = logging.getLogger(__name__)

def update_market_index(
    store: AccountingStore,
    market: str,
    side: RewardSide,
    total_units: int,
    block_number: int
) -> MarketRewardState:
    """Accrue reward emitted since the side's last update into its index.

    The block marker advances whenever blocks have passed, even when nothing
    was accrued (zero speed or zero units), so a later speed only applies to
    blocks elapsed after it was set.
    """
    if total_units < 0:
        raise InvalidParameterError("total units must be non-negative")
    block_number = safe32(block_number, "block number exceeds 32 bits")

    state = store.reward_state(market, side)
    if block_number < state.block:
        raise RangeError(
            f"block {block_number} is before last update {state.block} for {market} {side.value}"
        )
    delta_blocks = block_number - state.block
    if delta_blocks == 0:
        return state

    speed = store.reward_speed(market, side)
    if speed > 0:
        accrued = checked_mul(delta_blocks, speed)
        ratio = fraction(accrued, total_units) if total_units > 0 else Double(0)
        index = add_double(Double(state.index), ratio).to_index()
        logger.debug(
            "%s %s index %d -> %d over %d blocks",
            market, side.value, state.index, index, delta_blocks
        )
    else:
        index = state.index

    new_state = state.advance(index=index, block=block_number)
    store.put_reward_state(market, side, new_state)
    return new_state

def update_supply_index(ctx: ProtocolContext, market: str) -> MarketRewardState:
    """Update the supply side index from the market's total supply"""
    return update_market_index(
        ctx.store,
        market,
        RewardSide.SUPPLY,
        ctx.market_data.total_supply(market),
        ctx.block_number()
    )

def update_borrow_index(ctx: ProtocolContext, market: str, market_borrow_index: int) -> MarketRewardState:
    """Update the borrow side index.

    Total borrows are divided by the market borrow index so they are in the
    same units as the borrowers' normalized balances.
    """
    borrow_units = div_uint_exp(ctx.market_data.total_borrows(market), Exp(market_borrow_index))
    return update_market_index(
        ctx.store,
        market,
        RewardSide.BORROW,
        borrow_units,
        ctx.block_number()
    )
