import random
import time
from collections import defaultdict
from typing import Iterable, Optional
from .exceptions.chaos_exception import ChaosException


class ChaosConfig:
    """
    Fault-injection settings for exercising a VersionedMap.

    Failures and delays are injected before the wrapped operation runs, so an
    operation that fails this way never reaches the store. Runtime metrics are
    collected for reporting.

    Args:
        enabled (bool): Whether to inject anything at all. Defaults to False.
        failure_rate (float): Probability of an injected failure. Defaults to 0.1.
        delay_chance (float): Probability of an injected delay. Defaults to 0.2.
        max_delay (float): Upper bound of a delay in seconds. Defaults to 2.0.
        seed (int, optional): Seed for a reproducible run.
        target_operations (iterable of str, optional): Restrict injection to
            these operation names; all operations when omitted.
    """

    def __init__(
        self,
        enabled: bool = False,
        failure_rate: float = 0.1,
        delay_chance: float = 0.2,
        max_delay: float = 2.0,
        seed: Optional[int] = None,
        target_operations: Optional[Iterable[str]] = None,
    ):
        self.enabled = enabled
        self.failure_rate = failure_rate
        self.delay_chance = delay_chance
        self.max_delay = max_delay
        self.seed = seed
        self.target_operations = (
            frozenset(target_operations) if target_operations is not None else None
        )
        self.rng = random.Random(seed)

        # Chaos metrics
        self.total_operations = 0
        self.failures_injected = 0
        self.delays_injected = 0
        self.total_delay_time = 0.0
        self.failures_by_operation = defaultdict(int)
        self.delays_by_operation = defaultdict(int)

    def is_targeted(self, operation: str) -> bool:
        """True when injection applies to this operation name."""
        if not self.enabled:
            return False
        return self.target_operations is None or operation in self.target_operations

    def maybe_fail(self, operation: str) -> None:
        """Raise ChaosException with probability failure_rate."""
        self.total_operations += 1
        if self.is_targeted(operation) and self.rng.random() < self.failure_rate:
            self.failures_injected += 1
            self.failures_by_operation[operation] += 1
            print(f"[CHAOS] Injected failure in {operation}")
            raise ChaosException(f"Chaos failure occurred during {operation}.", operation)

    def maybe_delay(self, operation: str) -> None:
        """Sleep up to max_delay seconds with probability delay_chance."""
        if self.is_targeted(operation) and self.rng.random() < self.delay_chance:
            delay = self.rng.uniform(0, self.max_delay)
            self.delays_injected += 1
            self.delays_by_operation[operation] += 1
            self.total_delay_time += delay
            print(f"[CHAOS] Injected delay of {delay:.2f} seconds in {operation}")
            time.sleep(delay)

    def get_metrics(self):
        return {
            "Summary": {
                "total_operations": self.total_operations,
                "failures_injected": self.failures_injected,
                "delays_injected": self.delays_injected,
                "total_delay_time": round(self.total_delay_time, 2),
            },
            "Failures by Operation": dict(self.failures_by_operation),
            "Delays by Operation": dict(self.delays_by_operation),
        }

    def print_metrics(self):
        metrics = self.get_metrics()

        print("\n=== Chaos Metrics Summary ===")
        for key, value in metrics["Summary"].items():
            print(f"{key.replace('_', ' ').capitalize()}: {value}")

        for section in ("Failures by Operation", "Delays by Operation"):
            print(f"\n--- {section} ---")
            if metrics[section]:
                for operation, count in sorted(metrics[section].items()):
                    print(f"{operation}: {count}")
            else:
                print("None recorded.")
        print("===========================\n")
