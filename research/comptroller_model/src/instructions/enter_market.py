"""Market membership: adding markets to an account's collateral set"""
import logging
from typing import Iterable, List
from ..state.market import Action
from ..state.protocol_context import ProtocolContext
from ..errors import PausedError

logger = logging.getLogger(__name__)

def enter_market(ctx: ProtocolContext, market: str, account: str) -> bool:
    """Add a market to the account's entered markets.

    Idempotent. Returns True when the market was added and False when the
    account was already a member.
    """
    store = ctx.store
    record = store.listed_market(market)
    if record.is_paused(Action.ENTER_MARKET):
        raise PausedError(market, Action.ENTER_MARKET)

    if record.is_member(account):
        return False

    # flag and list are written together after all checks pass
    assets = store.account_assets.setdefault(account, [])
    assets.append(market)
    record.account_membership[account] = True
    logger.debug("%s entered market %s", account, market)
    return True

def enter_markets(ctx: ProtocolContext, account: str, markets: Iterable[str]) -> List[bool]:
    """Enter several markets at once, all-or-nothing"""
    with ctx.store.atomic():
        return [enter_market(ctx, market, account) for market in markets]
