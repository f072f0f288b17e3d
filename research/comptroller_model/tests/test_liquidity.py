"""Liquidity valuation and guarded redeem tests"""
import copy
import itertools
import pytest
from comptroller_model.src.constants import EXP_SCALE
from comptroller_model.src.errors import (
    InsufficientLiquidityError,
    InvalidParameterError,
    NotListedError,
    PriceError
)
from comptroller_model.src.instructions.enter_market import enter_market
from comptroller_model.src.instructions.evaluate_liquidity import (
    check_redeem_allowed,
    evaluate,
    get_account_liquidity
)
from comptroller_model.src.instructions.policy_hooks import borrow_allowed
from comptroller_model.src.state.simulated_chain import create_simulated_protocol
from comptroller_model.src.instructions.admin import set_collateral_factor, support_market

E = EXP_SCALE

def test_single_market_surplus_then_hypothetical_borrow_shortfall(protocol, list_market):
    ctx, book, _, _ = protocol
    list_market("vETH", collateral_factor=E // 2)
    book.mint("vETH", "alice", 1_000 * E)
    enter_market(ctx, "vETH", "alice")

    assert evaluate(ctx, "alice") == (500 * E, 0)
    assert get_account_liquidity(ctx, "alice") == (500 * E, 0)
    assert evaluate(ctx, "alice", "vETH", 0, 600 * E) == (0, 100 * E)

    with pytest.raises(InsufficientLiquidityError) as exc_info:
        borrow_allowed(ctx, "vETH", "alice", 600 * E)
    assert exc_info.value.shortfall == 100 * E

# (collateral factor, exchange rate, price, token balance, stored borrow)
MARKETS = {
    "vA": (8 * E // 10, 2 * E, 3 * E, 10 * E, 1 * E),
    "vB": (5 * E // 10, 1 * E, 1 * E, 100 * E, 20 * E),
    "vC": (0, 15 * E // 10, 2 * E, 5 * E, 30 * E),
}

def _protocol_entered_in(order):
    ctx, book, oracle, _ = create_simulated_protocol(admin="admin", start_block=1)
    for market, (factor, rate, price, balance, borrowed) in MARKETS.items():
        oracle.set_price(market, price)
        support_market(ctx, "admin", market)
        if factor:
            set_collateral_factor(ctx, "admin", market, factor)
        book.set_exchange_rate(market, rate)
        book.mint(market, "alice", balance)
        book.borrow(market, "alice", borrowed)
    for market in order:
        enter_market(ctx, market, "alice")
    return ctx

def test_evaluation_independent_of_entry_order():
    results = set()
    hypothetical = set()
    for order in itertools.permutations(MARKETS):
        ctx = _protocol_entered_in(order)
        results.add(evaluate(ctx, "alice"))
        hypothetical.add(evaluate(ctx, "alice", "vB", 40 * E, 0))

    # collateral 4.8*10 + 0.5*100 = 98, borrows 3*1 + 20 + 2*30 = 83
    assert results == {(15 * E, 0)}
    # redeeming 40 vB adds 0.5*40 = 20 of effects
    assert hypothetical == {(0, 5 * E)}

def test_evaluate_is_read_only():
    ctx = _protocol_entered_in(("vC", "vA", "vB"))
    before = copy.deepcopy(ctx.store)
    evaluate(ctx, "alice", "vA", 3 * E, 7 * E)
    assert ctx.store == before

def test_unlisted_market_in_account_set_aborts(protocol, list_market):
    ctx, book, _, _ = protocol
    list_market("vETH", collateral_factor=E // 2)
    book.mint("vETH", "alice", 10 * E)
    enter_market(ctx, "vETH", "alice")
    ctx.store.account_assets["alice"].append("vGHOST")

    with pytest.raises(NotListedError):
        evaluate(ctx, "alice")

def test_evaluate_rejects_negative_amounts(protocol):
    ctx, _, _, _ = protocol
    with pytest.raises(InvalidParameterError):
        evaluate(ctx, "alice", None, -1, 0)
    with pytest.raises(InvalidParameterError):
        evaluate(ctx, "alice", None, 0, -1)

def test_missing_price_aborts(protocol, list_market):
    ctx, _, oracle, _ = protocol
    list_market("vETH")
    enter_market(ctx, "vETH", "alice")
    oracle.set_price("vETH", 0)
    with pytest.raises(PriceError):
        evaluate(ctx, "alice")

def test_account_without_markets_has_no_liquidity(protocol):
    ctx, _, _, _ = protocol
    assert evaluate(ctx, "nobody") == (0, 0)

def test_non_member_redeem_always_allowed(protocol, list_market):
    ctx, _, _, _ = protocol
    list_market("vETH", collateral_factor=E // 2)
    check_redeem_allowed(ctx, "vETH", "alice", 10**40)

def test_redeem_check_uses_exchange_rate(protocol, list_market):
    ctx, book, _, _ = protocol
    list_market("vETH", collateral_factor=E // 2)
    book.set_exchange_rate("vETH", 2 * E)
    book.mint("vETH", "alice", 100 * E)
    book.borrow("vETH", "alice", 80 * E)
    enter_market(ctx, "vETH", "alice")

    # each token is worth 2 underlying at factor 0.5: collateral 100, debt 80
    check_redeem_allowed(ctx, "vETH", "alice", 20 * E)
    with pytest.raises(InsufficientLiquidityError) as exc_info:
        check_redeem_allowed(ctx, "vETH", "alice", 30 * E)
    assert exc_info.value.shortfall == 10 * E

def test_redeem_check_unlisted_market(protocol):
    ctx, _, _, _ = protocol
    with pytest.raises(NotListedError):
        check_redeem_allowed(ctx, "vNOPE", "alice", 1)

def test_redeem_check_rejects_negative_amount_for_any_account(protocol, list_market):
    ctx, book, _, _ = protocol
    list_market("vETH", collateral_factor=E // 2)
    book.mint("vETH", "alice", 10 * E)
    enter_market(ctx, "vETH", "alice")

    for redeemer in ("alice", "bob"):
        with pytest.raises(InvalidParameterError):
            check_redeem_allowed(ctx, "vETH", redeemer, -1)
