"""Account liquidity evaluation and the guarded redeem check"""
import logging
from typing import Optional, Tuple
from ..state.protocol_context import ProtocolContext
from ..errors import InsufficientLiquidityError, InvalidParameterError

logger = logging.getLogger(__name__)

def evaluate(
    ctx: ProtocolContext,
    account: str,
    target_market: Optional[str] = None,
    redeem_tokens: int = 0,
    borrow_amount: int = 0
) -> Tuple[int, int]:
    """Return (surplus, shortfall) for the account after a hypothetical
    redeem and/or borrow in `target_market`.

    Read only, safe for previews. Delegates the valuation to the context's
    liquidity lens.
    """
    if redeem_tokens < 0 or borrow_amount < 0:
        raise InvalidParameterError("hypothetical amounts must be non-negative")
    return ctx.lens.hypothetical_account_liquidity(
        ctx, account, target_market, redeem_tokens, borrow_amount
    )

def get_account_liquidity(ctx: ProtocolContext, account: str) -> Tuple[int, int]:
    return evaluate(ctx, account)

def check_redeem_allowed(ctx: ProtocolContext, market: str, redeemer: str, redeem_tokens: int) -> None:
    """Raise unless redeeming `redeem_tokens` keeps the redeemer solvent.

    Balance sufficiency is not checked here. Accounts that are not members of
    the market put no collateral at risk and always pass.
    """
    if redeem_tokens < 0:
        raise InvalidParameterError("redeem tokens must be non-negative")
    ctx.store.listed_market(market)
    if not ctx.store.check_membership(redeemer, market):
        return

    _, shortfall = evaluate(ctx, redeemer, market, redeem_tokens, 0)
    if shortfall > 0:
        logger.warning("redeem of %d from %s by %s rejected, shortfall %d", redeem_tokens, market, redeemer, shortfall)
        raise InsufficientLiquidityError(redeemer, shortfall)
