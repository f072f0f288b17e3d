"""Shared fixtures: a protocol wired to in-memory collaborators"""
import pytest
from comptroller_model.src.constants import EXP_SCALE
from comptroller_model.src.instructions.admin import set_collateral_factor, support_market
from comptroller_model.src.state.simulated_chain import create_simulated_protocol

ADMIN = "admin"

@pytest.fixture
def protocol():
    """(ctx, book, oracle, blocks) starting at block 1"""
    return create_simulated_protocol(admin=ADMIN, start_block=1, treasury_reserve=1_000_000 * EXP_SCALE)

@pytest.fixture
def list_market(protocol):
    ctx, _, oracle, _ = protocol

    def _list(market: str, collateral_factor: int = 0, price: int = EXP_SCALE) -> None:
        oracle.set_price(market, price)
        support_market(ctx, ADMIN, market)
        if collateral_factor:
            set_collateral_factor(ctx, ADMIN, market, collateral_factor)

    return _list
