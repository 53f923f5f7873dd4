"""Main store class implementing a key-value map with checkpoint versioning."""

import pprint
import threading
from typing import Dict, Any, Optional
from .history_manager import HistoryManager
from .exceptions.version_not_found import VersionNotFoundError


class VersionedMap:
    """
    In-memory string map with git-like versioning:
    - checkpoint records a full copy of the current state
    - rollback restores a recorded copy by its 1-based version
    - prune forgets every version but the latest
    """

    def __init__(self, strict_rollback: bool = False):
        # Current state
        self.data: Dict[str, str] = {}
        self.lock = threading.RLock()

        # Snapshot log
        self.history_manager = HistoryManager()

        # Configuration
        self.strict_rollback = strict_rollback

    def insert(self, key: str, value: str) -> None:
        """Insert or overwrite the value stored under key."""
        with self.lock:
            self._validate_entry(key, value)
            self.data[key] = value
            print(f"INSERT: {key} = {value}")

    def remove(self, key: str) -> None:
        """Remove key from the current state; missing keys are ignored."""
        with self.lock:
            if key not in self.data:
                return

            del self.data[key]
            print(f"REMOVE: {key}")

    def get(self, key: str) -> Optional[str]:
        """Get the value for key, or None when absent."""
        with self.lock:
            return self.data.get(key)

    def size(self) -> int:
        """Number of keys in the current state."""
        with self.lock:
            return len(self.data)

    def history_length(self) -> int:
        """Number of snapshots retained in the history."""
        with self.lock:
            return self.history_manager.get_snapshot_count()

    def checkpoint(self, description: str = "") -> None:
        """Save the current state as the newest version."""
        with self.lock:
            self.history_manager.append_snapshot(self.data, description)

    def rollback(self, version: int) -> bool:
        """Restore the current state from the snapshot at 1-based version.

        An unknown version leaves the current state untouched and returns
        False, or raises VersionNotFoundError when strict_rollback is set.
        The history itself is never modified.
        """
        with self.lock:
            try:
                snapshot = self.history_manager.get_snapshot(version)
            except VersionNotFoundError as e:
                if self.strict_rollback:
                    raise
                print(f"Rollback ignored: {e.message}")
                return False

            self.data = dict(snapshot.data)

            label = f"{snapshot.description} " if snapshot.description else ""
            print(
                f"Rolled back to version {version}: {label}"
                f"(timestamp: {snapshot.timestamp})"
            )
            return True

    def prune(self) -> None:
        """Discard all snapshots except the most recent one."""
        with self.lock:
            self.history_manager.prune()

    def _validate_entry(self, key: Any, value: Any) -> None:
        """Keys and values must both be strings."""
        if not isinstance(key, str):
            raise ValueError(f"Key must be string: {key!r}")
        if not isinstance(value, str):
            raise ValueError(f"Value must be string for key: {key}")

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        with self.lock:
            return key in self.data

    def __str__(self) -> str:
        with self.lock:
            history = [dict(snapshot.data) for snapshot in self.history_manager.snapshots]
            return (
                f"current: {pprint.pformat(self.data)}\n"
                f" history: {pprint.pformat(history)}"
            )

    def get_system_status(self) -> Dict[str, Any]:
        """Get current store status."""
        with self.lock:
            return {
                "data_size": len(self.data),
                "history_length": self.history_manager.get_snapshot_count(),
                "latest_snapshot": self.history_manager.get_latest_snapshot_description(),
                "strict_rollback": self.strict_rollback,
                "current_data": dict(self.data),
            }

    def print_status(self) -> None:
        """Print current store status."""
        status = self.get_system_status()
        print("\n=== STORE STATUS ===")
        print(f"Data entries: {status['data_size']}")
        print(f"History length: {status['history_length']}")
        print(f"Latest snapshot: {status['latest_snapshot']}")
        print(f"Strict rollback: {status['strict_rollback']}")
        print(f"Current data: {status['current_data']}")
        print("====================\n")
