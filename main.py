"""Main entry point demonstrating the versioned key-value store."""

from src.versioned_map import VersionedMap


def main():
    """Walk through the basic map operations and the versioning workflow."""
    store = VersionedMap()

    print("=== VERSIONED KEY-VALUE STORE ===\n")

    # Step 1: Basic map operations
    print("1. Inserting a key...")
    store.insert("key", "value")
    print(f"element: {store}")

    print(f"   get('key') -> {store.get('key')}")

    print("2. Removing the key...")
    store.remove("key")
    print(f"element: {store}, len: {store.size()}")

    # Step 2: Out-of-range rollback is ignored
    print("3. Checkpointing the empty state and rolling back to version 0...")
    store.checkpoint("empty")
    store.rollback(0)
    store.print_status()

    # Step 3: Several versions
    print("4. Recording two more versions...")
    store.insert("key", "value")
    store.checkpoint("one key")
    store.insert("key1", "value1")
    store.checkpoint("two keys")
    print(f"   history length: {store.history_length()}")

    print("5. Rolling back to version 2...")
    store.rollback(2)
    print(f"   get('key1') -> {store.get('key1')}")
    print(f"   get('key') -> {store.get('key')}")

    print("6. Pruning history...")
    store.prune()
    print(f"   history length: {store.history_length()}")

    print("7. Rolling back to the only remaining version...")
    store.rollback(1)

    print("\n=== FINAL STORE STATUS ===")
    store.print_status()


if __name__ == "__main__":
    main()
