"""Error taxonomy shared by ingestion, persistence and alert handling."""


class PairwatchError(Exception):
    """Base class for every error raised by pairwatch."""


class IngestionError(PairwatchError):
    """A refresh cycle could not produce a usable snapshot."""


class TransportError(IngestionError):
    """The fetch capability reported a non-success status or failed outright."""

    def __init__(self, url: str, status: int | None = None, detail: str = "") -> None:
        self.url = url
        self.status = status
        self.detail = detail
        reason = f"HTTP {status}" if status is not None else (detail or "request failed")
        super().__init__(f"Fetch of {url} failed: {reason}")


class EmptyPayload(IngestionError):
    """Body was blank, "{}" or "[]"."""

    def __init__(self, message: str = "Exchange returned empty data") -> None:
        super().__init__(message)


class UnsupportedFormat(IngestionError):
    """Body could not be classified or yielded no usable pairs."""

    def __init__(self, message: str = "Exchange data format is not supported") -> None:
        super().__init__(message)


class ExternalServiceError(PairwatchError):
    """Retriable failure of an upstream call made outside the ingestion contract."""


class PersistenceError(PairwatchError):
    """A Store read or write failed and could not be recovered locally."""


class SchemaMigrationFailure(PersistenceError):
    """Favorites schema upgrade failed. Handled inside SchemaManager, never surfaced."""


class AlertValidationError(PairwatchError):
    """A new alert was rejected before being stored."""


class InvalidAlertError(AlertValidationError):
    pass


class DuplicateAlertError(AlertValidationError):
    pass
