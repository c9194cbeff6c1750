"""
ResultStore Unit Tests
======================
Initialization, single-slot merge and snapshot isolation.
"""

import pytest

from chaincaps.probing.result_store import (
    CapabilityNotFoundError,
    ChainNotFoundError,
    ResultStore,
    StoreAlreadyInitializedError,
)
from chaincaps.shared.models import CapabilityId, ChainDescriptor, Outcome, OutcomeStatus


FEE = CapabilityId.FEE_MARKET
AUTH = CapabilityId.AUTHORIZATION


@pytest.fixture
def store(sample_chains):
    store = ResultStore()
    store.initialize(sample_chains, [FEE, AUTH])
    return store


class TestInitialize:

    def test_one_result_per_chain_all_pending(self, store, sample_chains):
        snapshot = store.snapshot()

        assert len(store) == len(sample_chains)
        assert [r.chain.id for r in snapshot] == [c.id for c in sample_chains]
        for result in snapshot:
            assert set(result.capabilities) == {FEE, AUTH}
            assert all(o.status == OutcomeStatus.PENDING for o in result.capabilities.values())

    def test_second_initialize_raises(self, store, sample_chains):
        with pytest.raises(StoreAlreadyInitializedError):
            store.initialize(sample_chains, [FEE])

    def test_duplicate_chain_ids_rejected(self):
        dup = ChainDescriptor(id=1, name="Ethereum", rpc_endpoint="https://a")
        with pytest.raises(ValueError):
            ResultStore().initialize([dup, dup], [FEE])

    def test_not_settled_until_everything_merged(self, store):
        assert store.pending_count() == 8
        assert store.is_settled() is False

    def test_empty_store_is_not_settled_before_initialize(self):
        assert ResultStore().is_settled() is False


class TestMerge:

    def test_merge_touches_one_slot(self, store):
        store.merge(1, FEE, Outcome.supported())

        result = store.get(1)
        assert result.outcome(FEE).status == OutcomeStatus.SUPPORTED
        assert result.outcome(AUTH).status == OutcomeStatus.PENDING
        assert store.get(137).outcome(FEE).status == OutcomeStatus.PENDING

    def test_merge_other_capability_keeps_first(self, store):
        store.merge(1, FEE, Outcome.supported())
        store.merge(1, AUTH, Outcome.failed("Timeout after 2000ms"))

        result = store.get(1)
        assert result.outcome(FEE) == Outcome.supported()
        assert result.outcome(AUTH) == Outcome.failed("Timeout after 2000ms")

    def test_unknown_chain_raises_not_found(self, store):
        with pytest.raises(ChainNotFoundError):
            store.merge(999999, FEE, Outcome.supported())

    def test_merge_before_initialize_raises_not_found(self):
        with pytest.raises(KeyError):
            ResultStore().merge(1, FEE, Outcome.supported())

    def test_unknown_capability_raises(self, sample_chains):
        store = ResultStore()
        store.initialize(sample_chains, [FEE])
        with pytest.raises(CapabilityNotFoundError):
            store.merge(1, AUTH, Outcome.supported())

    def test_pending_cannot_be_merged(self, store):
        with pytest.raises(ValueError):
            store.merge(1, FEE, Outcome.pending())

    def test_repeated_merge_is_last_write_wins(self, store):
        store.merge(1, FEE, Outcome.unsupported())
        store.merge(1, FEE, Outcome.supported())

        assert store.get(1).outcome(FEE).is_supported


class TestSnapshot:

    def test_snapshot_is_stable_across_later_merges(self, store):
        before = store.snapshot()
        store.merge(1, FEE, Outcome.supported())
        after = store.snapshot()

        assert before[1].outcome(FEE).is_pending
        assert after[1].outcome(FEE).is_supported

    def test_snapshot_results_are_read_only(self, store):
        result = store.snapshot()[0]
        with pytest.raises(TypeError):
            result.capabilities[FEE] = Outcome.supported()

    def test_summary_counts(self, store):
        store.merge(1, FEE, Outcome.supported())
        store.merge(10, FEE, Outcome.unsupported())
        store.merge(137, FEE, Outcome.failed("boom"))

        summary = store.summary()

        assert summary[FEE] == {"pending": 1, "supported": 1, "unsupported": 1, "failed": 1}
        assert summary[AUTH]["pending"] == 4

    def test_settled_after_all_merges(self, store, sample_chains):
        for chain in sample_chains:
            store.merge(chain.id, FEE, Outcome.supported())
            store.merge(chain.id, AUTH, Outcome.unsupported())

        assert store.is_settled() is True
        assert all(r.is_settled for r in store.snapshot())
