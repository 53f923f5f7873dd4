from typing import Callable, Any, Optional
from .chaos_config import ChaosConfig
from src.versioned_map import VersionedMap


class ChaosProxy:
    """Wraps a VersionedMap and routes every call through a ChaosConfig.

    Args:
        store (VersionedMap): The store to wrap.
        config (ChaosConfig): Failure and delay settings.
    """

    def __init__(self, store: VersionedMap, config: ChaosConfig):
        self.store = store
        self.chaos = config

    def _with_chaos(self, operation: Callable, *args, name: str, **kwargs) -> Any:
        self.chaos.maybe_fail(name)
        self.chaos.maybe_delay(name)
        return operation(*args, **kwargs)

    def insert(self, key: str, value: str) -> None:
        return self._with_chaos(self.store.insert, key, value, name="insert")

    def remove(self, key: str) -> None:
        return self._with_chaos(self.store.remove, key, name="remove")

    def get(self, key: str) -> Optional[str]:
        return self._with_chaos(self.store.get, key, name="get")

    def size(self) -> int:
        return self._with_chaos(self.store.size, name="size")

    def history_length(self) -> int:
        return self._with_chaos(self.store.history_length, name="history_length")

    def checkpoint(self, description: str = "") -> None:
        return self._with_chaos(self.store.checkpoint, description, name="checkpoint")

    def rollback(self, version: int) -> bool:
        return self._with_chaos(self.store.rollback, version, name="rollback")

    def prune(self) -> None:
        return self._with_chaos(self.store.prune, name="prune")

    def print_status(self):
        return self.store.print_status()

    def print_chaos_metrics(self):
        return self.chaos.print_metrics()
