"""Snapshot history management for versioning."""

import time
import copy
import threading
from types import MappingProxyType
from typing import Dict, List
from .models.snapshot import Snapshot
from .exceptions.version_not_found import VersionNotFoundError


class HistoryManager:
    """Keeps the ordered log of full-state snapshots, oldest first."""

    def __init__(self):
        self.snapshots: List[Snapshot] = []
        self.snapshot_counter = 0
        self.lock = threading.RLock()

    def _generate_snapshot_id(self) -> str:
        """Generate unique snapshot ID."""
        self.snapshot_counter += 1
        return f"snapshot_{self.snapshot_counter}_{int(time.time() * 1000)}"

    def append_snapshot(self, data: Dict[str, str], description: str = "") -> Snapshot:
        """Record an independent copy of data at the end of the history."""
        with self.lock:
            snapshot = Snapshot(
                snapshot_id=self._generate_snapshot_id(),
                timestamp=time.time(),
                data=MappingProxyType(copy.deepcopy(data)),
                description=description,
            )

            self.snapshots.append(snapshot)

            print(
                f"Snapshot recorded: version {len(self.snapshots)} "
                f"({snapshot.snapshot_id}) {description}".rstrip()
            )
            return snapshot

    def get_snapshot(self, version: int) -> Snapshot:
        """Get snapshot by 1-based version number."""
        with self.lock:
            count = len(self.snapshots)
            if (
                isinstance(version, bool)
                or not isinstance(version, int)
                or version < 1
                or version > count
            ):
                raise VersionNotFoundError(version, count)

            return self.snapshots[version - 1]

    def prune(self) -> int:
        """Forget every snapshot except the most recent one.

        Returns the number of snapshots discarded.
        """
        with self.lock:
            if not self.snapshots:
                return 0

            discarded = len(self.snapshots) - 1
            self.snapshots = [self.snapshots[-1]]

            print(f"History pruned: {discarded} snapshot(s) discarded")
            return discarded

    def get_snapshot_count(self) -> int:
        """Get total number of retained snapshots."""
        return len(self.snapshots)

    def get_latest_snapshot_description(self) -> str:
        """Get description of the latest snapshot."""
        if not self.snapshots:
            return "No snapshots"
        return self.snapshots[-1].description

    def has_snapshots(self) -> bool:
        """Check if any snapshots exist."""
        return len(self.snapshots) > 0
