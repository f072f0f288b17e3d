"""Default liquidity lens valuing accounts from stored balances"""
from typing import Optional, Tuple
from .exponential import Exp, mul_exp3, mul_scalar_truncate_add_uint
from .interfaces import LiquidityLens

class StoredValuationLens(LiquidityLens):
    """Sums collateral and borrow value over the account's entered markets.

    Balances and exchange rates are the stored values, interest accrued since
    each market's last update is not recomputed. Collateral and liability are
    kept as two additive sums so the result does not depend on the order the
    markets were entered.
    """

    def hypothetical_account_liquidity(
        self,
        ctx,
        account: str,
        target_market: Optional[str],
        redeem_tokens: int,
        borrow_amount: int
    ) -> Tuple[int, int]:
        store = ctx.store
        sum_collateral = 0
        sum_borrow_plus_effects = 0

        for market_id in store.assets_in(account):
            market = store.listed_market(market_id)

            token_balance = ctx.market_data.account_token_balance(market_id, account)
            borrow_balance = ctx.market_data.account_stored_borrow_balance(market_id, account)
            exchange_rate = Exp(ctx.market_data.exchange_rate_stored(market_id))
            collateral_factor = Exp(market.collateral_factor)
            oracle_price = Exp(ctx.price_of(market_id))

            # value of one market token in the base asset, weighted by collateral factor
            tokens_to_denom = mul_exp3(collateral_factor, exchange_rate, oracle_price)

            sum_collateral = mul_scalar_truncate_add_uint(
                tokens_to_denom, token_balance, sum_collateral
            )
            sum_borrow_plus_effects = mul_scalar_truncate_add_uint(
                oracle_price, borrow_balance, sum_borrow_plus_effects
            )

            if market_id == target_market:
                sum_borrow_plus_effects = mul_scalar_truncate_add_uint(
                    tokens_to_denom, redeem_tokens, sum_borrow_plus_effects
                )
                sum_borrow_plus_effects = mul_scalar_truncate_add_uint(
                    oracle_price, borrow_amount, sum_borrow_plus_effects
                )

        if sum_collateral >= sum_borrow_plus_effects:
            return sum_collateral - sum_borrow_plus_effects, 0
        return 0, sum_borrow_plus_effects - sum_collateral
