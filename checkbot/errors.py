"""Exception types raised across checkbot."""


class CheckbotConfigError(ValueError):
    """Required configuration is missing or invalid."""


class TransientFetchError(Exception):
    """Reading checker output or a metrics feed failed.

    Aborts the pass for the affected subject only.
    """

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Cannot fetch {source}: {message}")


class TrackingStoreError(Exception):
    """A mutating call against the issue tracker failed.

    Not retried in process; the next scheduled run picks the subject up again.
    """

    def __init__(self, operation: str, subject: str, message: str):
        self.operation = operation
        self.subject = subject
        super().__init__(f"{operation} failed for {subject}: {message}")
