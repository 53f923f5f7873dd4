class VersionNotFoundError(Exception):
    """Raised when a requested history version does not exist."""

    def __init__(self, version, available: int):
        self.version = version
        self.available = available
        self.message = (
            f"Version {version} not found (history holds {available} snapshot(s))"
        )
        super().__init__(self.message)

    def __str__(self):
        return f"VersionNotFoundError: {self.message}"
