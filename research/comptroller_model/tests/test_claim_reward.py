"""Reward claim tests"""
import pytest
from comptroller_model.src.constants import EXP_SCALE
from comptroller_model.src.errors import NotListedError, ProtocolError
from comptroller_model.src.instructions.admin import set_reward_speeds
from comptroller_model.src.instructions.claim_reward import claim_reward
from comptroller_model.src.state.reward_state import RewardSide
from comptroller_model.src.instructions.policy_hooks import mint_allowed
from comptroller_model.src.state.simulated_chain import InMemoryTreasury

E = EXP_SCALE

@pytest.fixture
def supplier(protocol, list_market):
    """alice supplies the whole vETH market at 10 reward per block for 10 blocks"""
    ctx, book, _, blocks = protocol
    list_market("vETH")
    set_reward_speeds(ctx, "admin", "vETH", 10 * E, 0)
    mint_allowed(ctx, "vETH", "alice", 100 * E)
    book.mint("vETH", "alice", 100 * E)
    blocks.advance(10)
    return ctx

def test_claim_pays_accrued_reward(supplier):
    ctx = supplier
    paid = claim_reward(ctx, "alice", ["vETH"])

    assert paid == 100 * E
    assert ctx.store.accrued("alice") == 0
    assert ctx.treasury.paid["alice"] == 100 * E

    assert claim_reward(ctx, "alice", ["vETH"]) == 0

def test_claim_defaults_to_every_listed_market(supplier, list_market):
    """A supplier who never entered the market is still paid"""
    ctx = supplier
    list_market("vUSDC")
    assert not ctx.store.check_membership("alice", "vETH")

    assert claim_reward(ctx, "alice") == 100 * E
    assert ctx.store.accrued("alice") == 0
    assert ctx.store.account_index("vUSDC", RewardSide.SUPPLY, "alice") != 0

def test_claim_keeps_unpaid_reward_accrued(supplier):
    ctx = supplier
    ctx.treasury = InMemoryTreasury(reserve=E)

    assert claim_reward(ctx, "alice", ["vETH"]) == 0
    assert ctx.store.accrued("alice") == 100 * E

def test_claim_errors(supplier):
    ctx = supplier
    with pytest.raises(NotListedError):
        claim_reward(ctx, "alice", ["vETH", "vNOPE"])
    # the checkpoint of vETH was rolled back with the failure
    assert ctx.store.accrued("alice") == 0

    ctx.treasury = None
    with pytest.raises(ProtocolError):
        claim_reward(ctx, "alice", ["vETH"])
