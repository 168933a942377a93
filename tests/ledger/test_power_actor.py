"""Tests for the storage power, reward and cron actors."""

from __future__ import annotations

from actor_sim.config.constants import (
    CONSENSUS_MINER_MIN_POWER,
    INITIAL_EPOCH_REWARD,
    REWARD_DECAY_DIVISOR,
)
from actor_sim.ledger import ExitCode, Ledger, Store
from actor_sim.ledger.actors.miner import MinerState
from actor_sim.ledger.actors.params import (
    AwardBlockRewardParams,
    CreateMinerParams,
    CreateMinerReturn,
)
from actor_sim.ledger.actors.power import PowerState
from actor_sim.ledger.actors.reward import RewardState
from actor_sim.ledger.builtin import (
    BURNT_FUNDS_ACTOR_ADDR,
    CRON_ACTOR_ADDR,
    REWARD_ACTOR_ADDR,
    STORAGE_POWER_ACTOR_ADDR,
    SYSTEM_ACTOR_ADDR,
    MethodsCron,
    MethodsPower,
    MethodsReward,
    RegisteredSealProof,
)

PROOF = RegisteredSealProof.STACKED_DRG_32GIB_V1_1


def _power_state(powers: dict[str, int]) -> tuple[Store, PowerState]:
    store = Store()
    st = PowerState.empty(store)
    for miner, raw in powers.items():
        st = st.with_claim_added(store, miner, PROOF)
        if raw:
            st = st.with_power_added(store, miner, raw, raw)
    return store, st


def _create_miner(ledger: Ledger, owner: str, value: int) -> CreateMinerReturn:
    ret, code = ledger.apply_message(
        owner,
        STORAGE_POWER_ACTOR_ADDR,
        value,
        MethodsPower.CREATE_MINER,
        CreateMinerParams(owner=owner, worker=owner, seal_proof_type=PROOF),
    )
    assert code == ExitCode.OK
    assert isinstance(ret, CreateMinerReturn)
    return ret


class TestConsensusMinimum:
    def test_miner_at_minimum_qualifies(self) -> None:
        store, st = _power_state({"f0100": CONSENSUS_MINER_MIN_POWER})
        assert st.miner_nominal_power_meets_consensus_minimum(store, "f0100")
        assert st.miner_above_min_power_count == 1

    def test_small_miners_ranked_in_top_four_qualify(self) -> None:
        store, st = _power_state(
            {"f0100": 5, "f0101": 4, "f0102": 3, "f0103": 2, "f0104": 1}
        )
        qualified = [
            m
            for m in ("f0100", "f0101", "f0102", "f0103", "f0104")
            if st.miner_nominal_power_meets_consensus_minimum(store, m)
        ]
        assert qualified == ["f0100", "f0101", "f0102", "f0103"]

    def test_ties_are_broken_by_address(self) -> None:
        store, st = _power_state(
            {"f0104": 1, "f0103": 1, "f0102": 1, "f0101": 1, "f0100": 1}
        )
        assert st.miner_nominal_power_meets_consensus_minimum(store, "f0100")
        assert not st.miner_nominal_power_meets_consensus_minimum(store, "f0104")

    def test_zero_power_never_qualifies(self) -> None:
        store, st = _power_state({"f0100": 0})
        assert not st.miner_nominal_power_meets_consensus_minimum(store, "f0100")

    def test_small_miner_excluded_once_enough_miners_above_minimum(self) -> None:
        powers = {f"f0{100 + i}": CONSENSUS_MINER_MIN_POWER for i in range(4)}
        powers["f0200"] = 1
        store, st = _power_state(powers)
        assert st.miner_above_min_power_count == 4
        assert not st.miner_nominal_power_meets_consensus_minimum(store, "f0200")


class TestPowerTotals:
    def test_committed_totals_used_below_min_miner_count(self) -> None:
        _, st = _power_state({"f0100": 7, "f0101": 3})
        assert st.total_quality_adj_power == 0
        assert st.current_total_power() == (10, 10)

    def test_consensus_totals_used_with_enough_miners(self) -> None:
        powers = {f"f0{100 + i}": CONSENSUS_MINER_MIN_POWER for i in range(4)}
        powers["f0200"] = 1
        _, st = _power_state(powers)
        assert st.current_total_power() == (
            4 * CONSENSUS_MINER_MIN_POWER,
            4 * CONSENSUS_MINER_MIN_POWER,
        )


class TestCreateMiner:
    def test_registers_claim_and_funds_miner(self) -> None:
        ledger = Ledger.with_singletons()
        [owner] = ledger.create_accounts(1, 1_000, seed=0)
        ret = _create_miner(ledger, owner, 1_000)

        assert ledger.get_balance(ret.id_address) == 1_000
        assert ledger.get_balance(owner) == 0
        assert ledger.normalize_address(ret.robust_address) == ret.id_address
        power = ledger.get_state(STORAGE_POWER_ACTOR_ADDR, PowerState)
        assert power.miner_count == 1
        claim = power.get_claim(ledger.store(), ret.id_address)
        assert claim is not None and claim.raw_byte_power == 0
        miner = ledger.get_state(ret.id_address, MinerState)
        assert miner.info.owner == owner

    def test_only_accounts_may_create_miners(self) -> None:
        ledger = Ledger.with_singletons()
        _, code = ledger.apply_message(
            SYSTEM_ACTOR_ADDR,
            STORAGE_POWER_ACTOR_ADDR,
            0,
            MethodsPower.CREATE_MINER,
            CreateMinerParams(owner="f00", worker="f00", seal_proof_type=PROOF),
        )
        assert code == ExitCode.SYS_ERR_FORBIDDEN


class TestAwardBlockReward:
    def test_pays_share_of_epoch_reward_per_win(self) -> None:
        ledger = Ledger.with_singletons()
        [owner] = ledger.create_accounts(1, 1_000, seed=0)
        miner = _create_miner(ledger, owner, 1_000).id_address

        _, code = ledger.apply_message(
            SYSTEM_ACTOR_ADDR,
            REWARD_ACTOR_ADDR,
            0,
            MethodsReward.AWARD_BLOCK_REWARD,
            AwardBlockRewardParams(miner=miner, penalty=0, gas_reward=0, win_count=2),
        )

        assert code == ExitCode.OK
        expected = INITIAL_EPOCH_REWARD * 2 // 5
        assert ledger.get_balance(miner) == 1_000 + expected
        assert ledger.get_state(miner, MinerState).total_rewards == expected
        assert ledger.get_state(REWARD_ACTOR_ADDR, RewardState).total_mined == expected

    def test_penalty_is_burnt(self) -> None:
        ledger = Ledger.with_singletons()
        [owner] = ledger.create_accounts(1, 1_000, seed=0)
        miner = _create_miner(ledger, owner, 1_000).id_address

        _, code = ledger.apply_message(
            SYSTEM_ACTOR_ADDR,
            REWARD_ACTOR_ADDR,
            0,
            MethodsReward.AWARD_BLOCK_REWARD,
            AwardBlockRewardParams(miner=miner, penalty=500, gas_reward=0, win_count=1),
        )

        assert code == ExitCode.OK
        assert ledger.get_balance(BURNT_FUNDS_ACTOR_ADDR) == 500
        assert ledger.get_balance(miner) == 1_000 + INITIAL_EPOCH_REWARD // 5 - 500

    def test_zero_wins_rejected(self) -> None:
        ledger = Ledger.with_singletons()
        [owner] = ledger.create_accounts(1, 1_000, seed=0)
        miner = _create_miner(ledger, owner, 1_000).id_address
        _, code = ledger.apply_message(
            SYSTEM_ACTOR_ADDR,
            REWARD_ACTOR_ADDR,
            0,
            MethodsReward.AWARD_BLOCK_REWARD,
            AwardBlockRewardParams(miner=miner, penalty=0, gas_reward=0, win_count=0),
        )
        assert code == ExitCode.ERR_ILLEGAL_ARGUMENT

    def test_only_system_may_award(self) -> None:
        ledger = Ledger.with_singletons()
        [owner] = ledger.create_accounts(1, 1_000, seed=0)
        miner = _create_miner(ledger, owner, 1_000).id_address
        _, code = ledger.apply_message(
            owner,
            REWARD_ACTOR_ADDR,
            0,
            MethodsReward.AWARD_BLOCK_REWARD,
            AwardBlockRewardParams(miner=miner, penalty=0, gas_reward=0, win_count=1),
        )
        assert code == ExitCode.SYS_ERR_FORBIDDEN


class TestCronTick:
    def test_epoch_tick_decays_reward_and_snapshots_power(self) -> None:
        ledger = Ledger.with_singletons()
        _, code = ledger.apply_message(
            SYSTEM_ACTOR_ADDR, CRON_ACTOR_ADDR, 0, MethodsCron.EPOCH_TICK, None
        )
        assert code == ExitCode.OK
        reward = ledger.get_state(REWARD_ACTOR_ADDR, RewardState)
        assert reward.this_epoch_reward == (
            INITIAL_EPOCH_REWARD - INITIAL_EPOCH_REWARD // REWARD_DECAY_DIVISOR
        )
        power = ledger.get_state(STORAGE_POWER_ACTOR_ADDR, PowerState)
        assert power.this_epoch_quality_adj_power == 0

    def test_only_system_may_tick_cron(self) -> None:
        ledger = Ledger.with_singletons()
        [a] = ledger.create_accounts(1, 10, seed=0)
        _, code = ledger.apply_message(a, CRON_ACTOR_ADDR, 0, MethodsCron.EPOCH_TICK, None)
        assert code == ExitCode.SYS_ERR_FORBIDDEN
