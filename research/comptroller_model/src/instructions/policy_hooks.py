"""Policy gates run by markets before mint, redeem, borrow and repay.

Every gate checkpoints rewards for the affected side before the market changes
any balance, and runs all-or-nothing against the accounting store.
"""
import logging
from .distribute_reward import distribute_borrower_reward, distribute_supplier_reward
from .enter_market import enter_market
from .evaluate_liquidity import check_redeem_allowed, evaluate
from .update_reward_index import update_borrow_index, update_supply_index
from ..state.market import Action, Market
from ..state.protocol_context import ProtocolContext
from ..errors import (
    CapExceededError,
    InsufficientLiquidityError,
    InvalidParameterError,
    PausedError
)
from ..exponential import Exp, checked_add, mul_scalar_truncate_add_uint

logger = logging.getLogger(__name__)

def _require_unpaused(record: Market, action: Action) -> None:
    if record.is_paused(action):
        logger.warning("%s denied on %s: paused", action.value, record.market_id)
        raise PausedError(record.market_id, action)

def _require_non_negative(amount: int, name: str) -> None:
    if amount < 0:
        raise InvalidParameterError(f"{name} must be non-negative")

def mint_allowed(ctx: ProtocolContext, market: str, minter: str, mint_amount: int) -> None:
    """Check a supply of `mint_amount` underlying and checkpoint supplier rewards"""
    _require_non_negative(mint_amount, "mint amount")
    with ctx.store.atomic():
        record = ctx.store.listed_market(market)
        _require_unpaused(record, Action.MINT)

        if record.supply_cap != 0:
            # total supply in underlying after the mint
            next_total_supply = mul_scalar_truncate_add_uint(
                Exp(ctx.market_data.exchange_rate_stored(market)),
                ctx.market_data.total_supply(market),
                mint_amount
            )
            if next_total_supply > record.supply_cap:
                raise CapExceededError(f"supply cap {record.supply_cap} reached for {market}")

        update_supply_index(ctx, market)
        distribute_supplier_reward(ctx, market, minter)

def redeem_allowed(ctx: ProtocolContext, market: str, redeemer: str, redeem_tokens: int) -> None:
    """Check a redeem of `redeem_tokens` and checkpoint supplier rewards"""
    _require_non_negative(redeem_tokens, "redeem tokens")
    with ctx.store.atomic():
        record = ctx.store.listed_market(market)
        _require_unpaused(record, Action.REDEEM)
        check_redeem_allowed(ctx, market, redeemer, redeem_tokens)

        update_supply_index(ctx, market)
        distribute_supplier_reward(ctx, market, redeemer)

def borrow_allowed(ctx: ProtocolContext, market: str, borrower: str, borrow_amount: int) -> None:
    """Check a borrow, entering the market first if needed, and checkpoint borrower rewards"""
    _require_non_negative(borrow_amount, "borrow amount")
    with ctx.store.atomic():
        record = ctx.store.listed_market(market)
        _require_unpaused(record, Action.BORROW)

        if not record.is_member(borrower):
            enter_market(ctx, market, borrower)

        ctx.price_of(market)

        if record.borrow_cap != 0:
            next_total_borrows = checked_add(ctx.market_data.total_borrows(market), borrow_amount)
            if next_total_borrows > record.borrow_cap:
                raise CapExceededError(f"borrow cap {record.borrow_cap} reached for {market}")

        _, shortfall = evaluate(ctx, borrower, market, 0, borrow_amount)
        if shortfall > 0:
            logger.warning("borrow of %d from %s by %s rejected, shortfall %d", borrow_amount, market, borrower, shortfall)
            raise InsufficientLiquidityError(borrower, shortfall)

        market_borrow_index = ctx.market_data.borrow_index(market)
        update_borrow_index(ctx, market, market_borrow_index)
        distribute_borrower_reward(ctx, market, borrower, market_borrow_index)

def repay_borrow_allowed(
    ctx: ProtocolContext,
    market: str,
    payer: str,
    borrower: str,
    repay_amount: int
) -> None:
    """Check a repayment by `payer` on behalf of `borrower` and checkpoint borrower rewards"""
    _require_non_negative(repay_amount, "repay amount")
    with ctx.store.atomic():
        record = ctx.store.listed_market(market)
        _require_unpaused(record, Action.REPAY)

        market_borrow_index = ctx.market_data.borrow_index(market)
        update_borrow_index(ctx, market, market_borrow_index)
        distribute_borrower_reward(ctx, market, borrower, market_borrow_index)
