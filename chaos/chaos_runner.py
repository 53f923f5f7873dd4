import random
import time
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from src.versioned_map import VersionedMap
from src.exceptions.version_not_found import VersionNotFoundError
from .exceptions.chaos_exception import ChaosException
from .chaos_config import ChaosConfig
from .chaos_proxy import ChaosProxy

OPERATIONS = ("insert", "remove", "get", "checkpoint", "rollback", "prune")


def _state_matches(
    store: VersionedMap, model_data: Dict[str, str], model_history: List[Dict[str, str]]
) -> bool:
    if store.data != model_data:
        return False
    if store.history_length() != len(model_history):
        return False
    recorded = [dict(snapshot.data) for snapshot in store.history_manager.snapshots]
    return recorded == model_history


def run_chaos(
    iterations: int = 100,
    config: Optional[ChaosConfig] = None,
    keys: Optional[Sequence[str]] = None,
    pause: float = 0.0,
    store: Optional[VersionedMap] = None,
) -> Dict[str, Any]:
    """Drive random operations through a ChaosProxy and check the store.

    Every successful call is mirrored in a plain dict plus a list of dict
    copies; after each step the store must equal that model. Injected
    failures happen before the store is reached, so they must leave it as is.
    """
    config = config or ChaosConfig()
    keys = list(keys or [f"item_{i}" for i in range(10)])
    store = store if store is not None else VersionedMap()
    proxy = ChaosProxy(store, config)
    picker = random.Random(config.seed)

    model_data: Dict[str, str] = dict(store.data)
    model_history: List[Dict[str, str]] = [
        dict(snapshot.data) for snapshot in store.history_manager.snapshots
    ]

    attempted = Counter()
    succeeded = 0
    chaos_failures = 0
    rejected = 0
    mismatches = 0

    for step in range(iterations):
        action = picker.choice(OPERATIONS)
        key = picker.choice(keys)
        attempted[action] += 1

        try:
            if action == "insert":
                value = str(picker.randint(1, 100))
                proxy.insert(key, value)
                model_data[key] = value
            elif action == "remove":
                proxy.remove(key)
                model_data.pop(key, None)
            elif action == "get":
                if proxy.get(key) != model_data.get(key):
                    mismatches += 1
                    print(f"[CHAOS TEST] GET {key} disagrees with model")
            elif action == "checkpoint":
                proxy.checkpoint(f"step_{step}")
                model_history.append(dict(model_data))
            elif action == "rollback":
                # Deliberately includes 0 and one past the end.
                version = picker.randint(0, len(model_history) + 1)
                restored = proxy.rollback(version)
                in_range = 1 <= version <= len(model_history)
                if restored != in_range:
                    mismatches += 1
                    print(f"[CHAOS TEST] ROLLBACK {version} returned {restored}")
                if in_range:
                    model_data = dict(model_history[version - 1])
            elif action == "prune":
                proxy.prune()
                model_history = model_history[-1:]
            succeeded += 1
        except ChaosException as e:
            chaos_failures += 1
            print(f"[CHAOS TEST] {e}")
        except VersionNotFoundError as e:
            rejected += 1
            print(f"[CHAOS TEST] {e}")

        if not _state_matches(store, model_data, model_history):
            mismatches += 1
            print(f"[CHAOS TEST] State diverged from model after {action}")
            model_data = dict(store.data)
            model_history = [
                dict(snapshot.data)
                for snapshot in store.history_manager.snapshots
            ]

        if pause:
            time.sleep(pause)

    return {
        "iterations": iterations,
        "succeeded": succeeded,
        "chaos_failures": chaos_failures,
        "rejected": rejected,
        "mismatches": mismatches,
        "attempted": dict(attempted),
        "final_size": store.size(),
        "final_history_length": store.history_length(),
    }


if __name__ == "__main__":
    chaos = ChaosConfig(enabled=True, failure_rate=0.3, delay_chance=0.4, max_delay=1.5)
    real_store = VersionedMap()

    report = run_chaos(iterations=30, config=chaos, store=real_store, pause=0.2)

    print("[CHAOS TEST] Final store state:")
    real_store.print_status()
    print(f"[CHAOS TEST] Report: {report}")

    print("\n[CHAOS TEST] Chaos metrics:")
    chaos.print_metrics()
