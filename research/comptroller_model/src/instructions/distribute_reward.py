"""Account reward reconciliation"""
import logging
from ..state.accounting_store import AccountingStore
from ..state.protocol_context import ProtocolContext
from ..state.reward_state import RewardSide
from ..constants import REWARD_INITIAL_INDEX
from ..errors import InvalidParameterError
from ..exponential import Double, Exp, div_uint_exp, mul_uint_double, sub_double

logger = logging.getLogger(__name__)

def reconcile_account(
    store: AccountingStore,
    market: str,
    side: RewardSide,
    account: str,
    account_units: int
) -> int:
    """Credit the account for index growth since its last snapshot.

    Must run after update_market_index for the same market and side in the
    same interaction, otherwise the reward is computed from a stale index.
    Returns the reward credited.
    """
    if account_units < 0:
        raise InvalidParameterError("account units must be non-negative")

    current_index = store.reward_state(market, side).index
    account_index = store.account_index(market, side, account)

    # accounts that predate reward tracking start at the initial index, not 0
    if account_index == 0 and current_index >= REWARD_INITIAL_INDEX:
        account_index = REWARD_INITIAL_INDEX

    delta_index = sub_double(Double(current_index), Double(account_index))
    reward = mul_uint_double(account_units, delta_index)
    total = store.credit_accrued(account, reward)
    store.set_account_index(market, side, account, current_index)

    if reward:
        logger.debug("%s earned %d on %s %s, accrued %d", account, reward, market, side.value, total)
    return reward

def distribute_supplier_reward(ctx: ProtocolContext, market: str, supplier: str) -> int:
    """Reconcile a supplier against the supply index using their token balance"""
    return reconcile_account(
        ctx.store,
        market,
        RewardSide.SUPPLY,
        supplier,
        ctx.market_data.account_token_balance(market, supplier)
    )

def distribute_borrower_reward(
    ctx: ProtocolContext,
    market: str,
    borrower: str,
    market_borrow_index: int
) -> int:
    """Reconcile a borrower using their stored borrow normalized by the borrow index"""
    borrower_units = div_uint_exp(
        ctx.market_data.account_stored_borrow_balance(market, borrower),
        Exp(market_borrow_index)
    )
    return reconcile_account(ctx.store, market, RewardSide.BORROW, borrower, borrower_units)
