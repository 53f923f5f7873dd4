"""Unit tests for HistoryManager."""

import dataclasses
import pytest
import threading
from unittest.mock import patch
from src.history_manager import HistoryManager
from src.models.snapshot import Snapshot
from src.exceptions.version_not_found import VersionNotFoundError


class TestHistoryManagerSetup:
    """Test HistoryManager initialization."""

    def test_init_empty(self):
        """A new manager holds no snapshots."""
        manager = HistoryManager()
        assert manager.snapshots == []
        assert manager.snapshot_counter == 0
        assert manager.lock is not None
        assert manager.get_snapshot_count() == 0
        assert manager.has_snapshots() is False


class TestSnapshotCreation:
    """Test appending snapshots."""

    @pytest.fixture
    def history_manager(self):
        """Provide a fresh HistoryManager instance for testing."""
        return HistoryManager()

    @pytest.fixture
    def sample_data(self):
        """Provide sample data for snapshot testing."""
        return {"key": "value", "key1": "value1"}

    def test_append_snapshot_basic(self, history_manager, sample_data):
        """Test basic snapshot creation."""
        snapshot = history_manager.append_snapshot(sample_data, "first")

        assert isinstance(snapshot, Snapshot)
        assert snapshot.description == "first"
        assert snapshot.data == sample_data
        assert snapshot.data is not sample_data
        assert snapshot.snapshot_id.startswith("snapshot_1_")
        assert history_manager.get_snapshot_count() == 1

    def test_append_snapshot_without_description(self, history_manager, sample_data):
        """Description defaults to an empty string."""
        snapshot = history_manager.append_snapshot(sample_data)
        assert snapshot.description == ""

    def test_snapshot_data_isolation(self, history_manager):
        """Mutating the source after a snapshot does not affect the snapshot."""
        data = {"key": "value"}
        snapshot = history_manager.append_snapshot(data)

        data["key"] = "changed"
        data["other"] = "new"

        assert snapshot.data == {"key": "value"}

    def test_identical_snapshots_are_distinct(self, history_manager, sample_data):
        """Two snapshots of the same state are equal but not the same object."""
        first = history_manager.append_snapshot(sample_data)
        second = history_manager.append_snapshot(sample_data)

        assert history_manager.get_snapshot_count() == 2
        assert first.data == second.data
        assert first.data is not second.data
        assert first.snapshot_id != second.snapshot_id

    @patch("time.time")
    def test_snapshot_id_generation(self, mock_time, history_manager, sample_data):
        """Snapshot IDs combine the counter with the millisecond timestamp."""
        mock_time.return_value = 1234567890.123

        snapshot = history_manager.append_snapshot(sample_data)

        assert snapshot.snapshot_id == "snapshot_1_1234567890123"
        assert snapshot.timestamp == 1234567890.123

    @patch("builtins.print")
    def test_snapshot_creation_logging(self, mock_print, history_manager, sample_data):
        """Appending a snapshot prints its version."""
        history_manager.append_snapshot(sample_data, "logged")

        mock_print.assert_called_once()
        call_args = mock_print.call_args[0][0]
        assert "Snapshot recorded: version 1" in call_args
        assert "logged" in call_args


class TestSnapshotImmutability:
    """Test that recorded snapshots cannot be rewritten."""

    @pytest.fixture
    def snapshot(self):
        """Provide a snapshot recorded from a small map."""
        return HistoryManager().append_snapshot({"key": "value"}, "frozen")

    def test_snapshot_data_is_read_only(self, snapshot):
        """Item assignment and deletion on snapshot data fail."""
        with pytest.raises(TypeError):
            snapshot.data["key"] = "tampered"
        with pytest.raises(TypeError):
            del snapshot.data["key"]
        assert snapshot.data == {"key": "value"}

    def test_snapshot_fields_are_frozen(self, snapshot):
        """Snapshot attributes cannot be reassigned."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.data = {"key": "tampered"}
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.description = "changed"
        assert snapshot.description == "frozen"


class TestSnapshotRetrieval:
    """Test 1-based snapshot lookup."""

    @pytest.fixture
    def populated_manager(self):
        """Provide a HistoryManager with three snapshots."""
        manager = HistoryManager()
        for i in range(3):
            manager.append_snapshot({"step": str(i)}, f"Snapshot {i}")
        return manager

    def test_get_first_and_last(self, populated_manager):
        """Version 1 is the oldest, version count is the newest."""
        assert populated_manager.get_snapshot(1).description == "Snapshot 0"
        assert populated_manager.get_snapshot(3).description == "Snapshot 2"

    def test_get_snapshot_empty_history(self):
        """Lookup in an empty history raises VersionNotFoundError."""
        manager = HistoryManager()
        with pytest.raises(VersionNotFoundError) as exc_info:
            manager.get_snapshot(1)
        assert exc_info.value.version == 1
        assert exc_info.value.available == 0

    def test_get_snapshot_out_of_range(self, populated_manager):
        """Zero, negative and too-large versions are rejected."""
        for version in (0, -1, -3, 4, 100):
            with pytest.raises(VersionNotFoundError, match=f"Version {version} not found"):
                populated_manager.get_snapshot(version)

    def test_get_snapshot_rejects_non_integers(self, populated_manager):
        """Only real integers name a version."""
        for version in ("1", 1.0, None, True):
            with pytest.raises(VersionNotFoundError):
                populated_manager.get_snapshot(version)


class TestPrune:
    """Test pruning the history."""

    def test_prune_keeps_latest(self):
        """Prune leaves only the newest snapshot, now at version 1."""
        manager = HistoryManager()
        for i in range(4):
            manager.append_snapshot({"step": str(i)}, f"Snapshot {i}")
        latest = manager.get_snapshot(4)

        discarded = manager.prune()

        assert discarded == 3
        assert manager.get_snapshot_count() == 1
        assert manager.get_snapshot(1) is latest

    def test_prune_empty_history_is_noop(self):
        """Prune on an empty history does nothing."""
        manager = HistoryManager()
        assert manager.prune() == 0
        assert manager.get_snapshot_count() == 0

    def test_prune_single_snapshot(self):
        """Prune with one snapshot keeps it."""
        manager = HistoryManager()
        manager.append_snapshot({"a": "b"}, "only")
        assert manager.prune() == 0
        assert manager.get_latest_snapshot_description() == "only"

    def test_counter_not_reused_after_prune(self):
        """Snapshot IDs keep counting after a prune."""
        manager = HistoryManager()
        manager.append_snapshot({})
        manager.append_snapshot({})
        manager.prune()

        snapshot = manager.append_snapshot({})

        assert snapshot.snapshot_id.startswith("snapshot_3_")
        assert manager.get_snapshot_count() == 2


class TestHistoryUtilityMethods:
    """Test HistoryManager utility methods."""

    def test_latest_description_empty(self):
        """Empty history reports no snapshots."""
        assert HistoryManager().get_latest_snapshot_description() == "No snapshots"

    def test_latest_description_with_data(self):
        """Latest description follows the newest snapshot."""
        manager = HistoryManager()
        manager.append_snapshot({}, "First")
        manager.append_snapshot({}, "Second")
        assert manager.get_latest_snapshot_description() == "Second"
        assert manager.has_snapshots() is True


class TestThreadSafety:
    """Test that the lock serializes concurrent appends."""

    def test_concurrent_snapshot_creation(self):
        """Concurrent appends all land with unique IDs."""
        manager = HistoryManager()
        num_threads = 8
        snapshots_per_thread = 5
        results = []

        def create_snapshots(thread_id):
            for i in range(snapshots_per_thread):
                results.append(
                    manager.append_snapshot(
                        {"thread": str(thread_id)}, f"Thread {thread_id} #{i}"
                    )
                )

        threads = [
            threading.Thread(target=create_snapshots, args=(i,))
            for i in range(num_threads)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert manager.get_snapshot_count() == num_threads * snapshots_per_thread
        snapshot_ids = [snapshot.snapshot_id for snapshot in results]
        assert len(set(snapshot_ids)) == len(snapshot_ids)
