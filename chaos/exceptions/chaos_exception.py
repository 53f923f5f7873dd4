class ChaosException(Exception):
    """Injected failure raised in place of a store operation."""

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self):
        return f"ChaosException: {self.message}"
