"""Snapshot data model for the version history."""

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class Snapshot:
    """Represents one recorded version of the store.

    data is a read-only view; copy it into a dict before changing it.
    """

    snapshot_id: str
    timestamp: float
    data: Mapping[str, str]
    description: str
