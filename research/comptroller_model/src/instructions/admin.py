"""Admin setters: listing, risk parameters, reward speeds, pauses and caps"""
import logging
from .update_reward_index import update_borrow_index, update_supply_index
from ..state.market import Action, Market
from ..state.protocol_context import ProtocolContext
from ..state.reward_state import RewardSide, initial_reward_state
from ..constants import COLLATERAL_FACTOR_MAX_MANTISSA
from ..errors import AlreadyListedError, InvalidParameterError, UnauthorizedError

logger = logging.getLogger(__name__)

def _require_allowed(ctx: ProtocolContext, caller: str, action: str) -> None:
    if ctx.access_gate is None or not ctx.access_gate.is_allowed(caller, action):
        raise UnauthorizedError(f"{caller} may not call {action}")

def support_market(ctx: ProtocolContext, caller: str, market: str) -> None:
    """List a market and start both reward indices at the current block"""
    _require_allowed(ctx, caller, "support_market")
    store = ctx.store
    if store.is_listed(market):
        raise AlreadyListedError(f"Market {market} is already listed")

    block = ctx.block_number()
    store.markets[market] = Market(market_id=market, is_listed=True)
    for side in RewardSide:
        if not store.reward_state(market, side).is_initialized():
            store.put_reward_state(market, side, initial_reward_state(block))
    logger.info("market %s listed at block %d", market, block)

def set_collateral_factor(ctx: ProtocolContext, caller: str, market: str, new_collateral_factor: int) -> int:
    """Set a market's collateral factor, returning the previous one"""
    _require_allowed(ctx, caller, "set_collateral_factor")
    record = ctx.store.listed_market(market)
    if new_collateral_factor < 0 or new_collateral_factor > COLLATERAL_FACTOR_MAX_MANTISSA:
        raise InvalidParameterError(
            f"collateral factor {new_collateral_factor} outside [0, {COLLATERAL_FACTOR_MAX_MANTISSA}]"
        )
    if new_collateral_factor != 0:
        # collateral without a price would value at zero
        ctx.price_of(market)

    old = record.collateral_factor
    record.collateral_factor = new_collateral_factor
    logger.info("collateral factor for %s: %d -> %d", market, old, new_collateral_factor)
    return old

def set_reward_speeds(
    ctx: ProtocolContext,
    caller: str,
    market: str,
    supply_speed: int,
    borrow_speed: int
) -> None:
    """Change a market's reward emission per block on each side.

    Both indices are brought up to date at the old speeds first so the new
    speeds only apply from the current block on.
    """
    _require_allowed(ctx, caller, "set_reward_speeds")
    if supply_speed < 0 or borrow_speed < 0:
        raise InvalidParameterError("reward speeds must be non-negative")

    store = ctx.store
    with store.atomic():
        store.listed_market(market)
        if store.reward_speed(market, RewardSide.SUPPLY) != supply_speed:
            update_supply_index(ctx, market)
            store.reward_speeds[(market, RewardSide.SUPPLY)] = supply_speed
        if store.reward_speed(market, RewardSide.BORROW) != borrow_speed:
            update_borrow_index(ctx, market, ctx.market_data.borrow_index(market))
            store.reward_speeds[(market, RewardSide.BORROW)] = borrow_speed
    logger.info("reward speeds for %s: supply %d borrow %d", market, supply_speed, borrow_speed)

def set_action_paused(ctx: ProtocolContext, caller: str, market: str, action: Action, paused: bool) -> None:
    _require_allowed(ctx, caller, "set_action_paused")
    ctx.store.listed_market(market).set_paused(action, paused)
    logger.info("%s on %s paused=%s", action.value, market, paused)

def set_market_borrow_cap(ctx: ProtocolContext, caller: str, market: str, borrow_cap: int) -> None:
    _require_allowed(ctx, caller, "set_market_borrow_cap")
    if borrow_cap < 0:
        raise InvalidParameterError("borrow cap must be non-negative")
    ctx.store.listed_market(market).borrow_cap = borrow_cap
    logger.info("borrow cap for %s: %d", market, borrow_cap)

def set_market_supply_cap(ctx: ProtocolContext, caller: str, market: str, supply_cap: int) -> None:
    _require_allowed(ctx, caller, "set_market_supply_cap")
    if supply_cap < 0:
        raise InvalidParameterError("supply cap must be non-negative")
    ctx.store.listed_market(market).supply_cap = supply_cap
    logger.info("supply cap for %s: %d", market, supply_cap)
