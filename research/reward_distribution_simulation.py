import numpy as np
import matplotlib.pyplot as plt
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from pathlib import Path
from datetime import datetime

from comptroller_model.src.constants import DOUBLE_SCALE, EXP_SCALE
from comptroller_model.src.errors import ProtocolError
from comptroller_model.src.instructions.admin import (
    set_collateral_factor,
    set_reward_speeds,
    support_market
)
from comptroller_model.src.instructions.distribute_reward import (
    distribute_borrower_reward,
    distribute_supplier_reward
)
from comptroller_model.src.instructions.enter_market import enter_market
from comptroller_model.src.instructions.policy_hooks import (
    borrow_allowed,
    mint_allowed,
    redeem_allowed,
    repay_borrow_allowed
)
from comptroller_model.src.instructions.update_reward_index import (
    update_borrow_index,
    update_supply_index
)
from comptroller_model.src.state.reward_state import RewardSide
from comptroller_model.src.state.simulated_chain import create_simulated_protocol

ACTIONS = ("mint", "redeem", "borrow", "repay")

@dataclass
class SimulationParams:
    num_accounts: int = 10
    simulation_blocks: int = 500
    markets: Tuple[str, ...] = ("vETH", "vUSDC")
    supply_speed: int = EXP_SCALE       # reward per block, supply side
    borrow_speed: int = EXP_SCALE // 2  # reward per block, borrow side
    collateral_factor: int = EXP_SCALE * 3 // 4
    max_action_tokens: int = 1_000 * EXP_SCALE
    random_seed: Optional[int] = None
    experiment_name: str = "default"
    action_weights: Tuple[float, ...] = (0.4, 0.2, 0.25, 0.15)  # mint, redeem, borrow, repay

@dataclass
class SimulationTotals:
    emitted: int = 0
    rejected: Dict[str, int] = field(default_factory=lambda: {action: 0 for action in ACTIONS})
    executed: Dict[str, int] = field(default_factory=lambda: {action: 0 for action in ACTIONS})

class RewardDistributionSimulation:
    """Random supply/borrow activity driven through the policy hooks"""

    def __init__(self, params: SimulationParams):
        self.params = params
        self.rng = np.random.default_rng(params.random_seed)
        self.ctx, self.book, self.oracle, self.blocks = create_simulated_protocol()
        self.accounts = [f"account_{i}" for i in range(params.num_accounts)]
        self.totals = SimulationTotals()
        self.records: List[dict] = []

        for market in params.markets:
            self.oracle.set_price(market, EXP_SCALE)
            support_market(self.ctx, "admin", market)
            set_collateral_factor(self.ctx, "admin", market, params.collateral_factor)
            set_reward_speeds(self.ctx, "admin", market, params.supply_speed, params.borrow_speed)

    def _amount(self, upper: int) -> int:
        if upper <= 0:
            return 0
        return int(self.rng.uniform(0, 1) * upper)

    def step(self) -> None:
        """Advance one block and run one random action"""
        self.blocks.advance(1)
        self.totals.emitted += len(self.params.markets) * (self.params.supply_speed + self.params.borrow_speed)

        account = self.accounts[self.rng.integers(len(self.accounts))]
        market = self.params.markets[self.rng.integers(len(self.params.markets))]
        action = ACTIONS[self.rng.choice(len(ACTIONS), p=self.params.action_weights)]

        try:
            if action == "mint":
                amount = self._amount(self.params.max_action_tokens)
                mint_allowed(self.ctx, market, account, amount)
                enter_market(self.ctx, market, account)
                self.book.mint(market, account, amount)
            elif action == "redeem":
                amount = self._amount(self.book.account_token_balance(market, account))
                redeem_allowed(self.ctx, market, account, amount)
                self.book.redeem(market, account, amount)
            elif action == "borrow":
                amount = self._amount(self.params.max_action_tokens // 2)
                borrow_allowed(self.ctx, market, account, amount)
                self.book.borrow(market, account, amount)
            else:
                amount = self._amount(self.book.account_stored_borrow_balance(market, account))
                repay_borrow_allowed(self.ctx, market, account, account, amount)
                self.book.repay(market, account, amount)
        except ProtocolError:
            self.totals.rejected[action] += 1
        else:
            self.totals.executed[action] += 1

        self.records.append(self._snapshot())

    def _snapshot(self) -> dict:
        store = self.ctx.store
        record = {
            "block": self.blocks.current_block(),
            "emitted": self.totals.emitted / EXP_SCALE,
            "accrued": sum(store.reward_accrued.values()) / EXP_SCALE,
        }
        for market in self.params.markets:
            record[f"{market}_supply_index"] = store.reward_state(market, RewardSide.SUPPLY).index / DOUBLE_SCALE
            record[f"{market}_borrow_index"] = store.reward_state(market, RewardSide.BORROW).index / DOUBLE_SCALE
        return record

    def settle(self) -> int:
        """Checkpoint every account in every market and return total accrued"""
        for market in self.params.markets:
            borrow_index = self.book.borrow_index(market)
            update_supply_index(self.ctx, market)
            update_borrow_index(self.ctx, market, borrow_index)
            for account in self.accounts:
                distribute_supplier_reward(self.ctx, market, account)
                distribute_borrower_reward(self.ctx, market, account, borrow_index)
        return sum(self.ctx.store.reward_accrued.values())

    def simulate(self) -> pd.DataFrame:
        for _ in range(self.params.simulation_blocks):
            self.step()
        self.settle()
        self.records.append(self._snapshot())
        return self.history

    @property
    def history(self) -> pd.DataFrame:
        return pd.DataFrame(self.records)

    def check_conservation(self) -> bool:
        """Rewards credited never exceed rewards emitted"""
        return sum(self.ctx.store.reward_accrued.values()) <= self.totals.emitted

    def plot_results(self, output_dir: Optional[Path] = None) -> Path:
        output_dir = output_dir or Path('research/results') / self.params.experiment_name
        output_dir.mkdir(parents=True, exist_ok=True)
        history = self.history

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8))

        # Plot indices
        for market in self.params.markets:
            ax1.plot(history["block"], history[f"{market}_supply_index"], label=f"{market} supply")
            ax1.plot(history["block"], history[f"{market}_borrow_index"], linestyle='--', label=f"{market} borrow")
        ax1.set_ylabel('Reward index')
        ax1.set_title('Reward Indices Over Time')
        ax1.legend()
        ax1.grid(True)

        # Plot accrued vs emitted
        ax2.plot(history["block"], history["emitted"], label='Emitted', color='gray')
        ax2.plot(history["block"], history["accrued"], label='Accrued', color='orange')
        ax2.set_ylabel('Reward')
        ax2.set_xlabel('Block')
        ax2.set_title('Accrued vs Emitted Reward')
        ax2.legend()
        ax2.grid(True)

        plt.tight_layout()

        plot_name = f"accounts_{self.params.num_accounts}_blocks_{self.params.simulation_blocks}"
        if self.params.random_seed is not None:
            plot_name += f"_seed_{self.params.random_seed}"

        path = output_dir / f"{plot_name}.png"
        plt.savefig(path)
        plt.close()
        return path

def compare_speed_splits(splits: List[Tuple[int, int]], base_params: SimulationParams) -> pd.DataFrame:
    """Run one simulation per (supply_speed, borrow_speed) split and summarize"""
    rows = []
    for supply_speed, borrow_speed in splits:
        params = SimulationParams(
            num_accounts=base_params.num_accounts,
            simulation_blocks=base_params.simulation_blocks,
            markets=base_params.markets,
            supply_speed=supply_speed,
            borrow_speed=borrow_speed,
            collateral_factor=base_params.collateral_factor,
            max_action_tokens=base_params.max_action_tokens,
            random_seed=base_params.random_seed,
            experiment_name=base_params.experiment_name,
            action_weights=base_params.action_weights
        )
        sim = RewardDistributionSimulation(params)
        history = sim.simulate()
        final = history.iloc[-1]
        rows.append({
            "supply_speed": supply_speed / EXP_SCALE,
            "borrow_speed": borrow_speed / EXP_SCALE,
            "emitted": final["emitted"],
            "accrued": final["accrued"],
            "distributed_share": final["accrued"] / final["emitted"] if final["emitted"] else 0.0,
            "rejected": sum(sim.totals.rejected.values()),
        })
    return pd.DataFrame(rows)

def main():
    base_params = SimulationParams(
        experiment_name="speed_split_comparison",
        random_seed=57,
        simulation_blocks=1_000
    )

    summary = compare_speed_splits(
        [
            (EXP_SCALE, EXP_SCALE // 2),
            (EXP_SCALE // 2, EXP_SCALE),
            (EXP_SCALE, 0),
        ],
        base_params
    )
    output_dir = Path('research/results') / base_params.experiment_name
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    summary.to_csv(output_dir / f"summary_{timestamp}.csv", index=False)

    # single run for the plot
    sim = RewardDistributionSimulation(base_params)
    sim.simulate()
    sim.plot_results()

if __name__ == "__main__":
    main()
