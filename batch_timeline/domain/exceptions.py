"""Domain-specific exception classes."""


class BatchTimelineError(Exception):
    """Base exception for batch timeline errors."""

    pass


class InvalidFarmConfigError(BatchTimelineError, ValueError):
    """Raised when a farm configuration is rejected at load time."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid farm configuration: {reason}")


class InvalidBatchIdError(BatchTimelineError, ValueError):
    """Raised when a batch identifier does not match YYYY-GNN."""

    def __init__(self, batch_id: str):
        self.batch_id = batch_id
        super().__init__(f"Invalid batch id '{batch_id}': expected format YYYY-GNN")


class RecordNotFoundError(BatchTimelineError):
    """Raised when a stored record cannot be found by its key."""

    def __init__(self, kind: str, key: object):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} {key} not found")


class BatchNotInWindowError(BatchTimelineError):
    """Raised when a batch falls outside the enumerated window for a date."""

    def __init__(self, batch_id: str, as_of: object):
        self.batch_id = batch_id
        self.as_of = as_of
        super().__init__(f"Batch {batch_id} is not in the timeline window for {as_of}")


class ImportValidationError(BatchTimelineError):
    """Raised when a restore payload contains rows that fail validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            f"Import rejected: {len(errors)} invalid row(s); first error: {errors[0]}"
            if errors
            else "Import rejected"
        )


class ReferenceDateOutOfRangeError(BatchTimelineError):
    """Raised when the batch window for a date falls outside the supported calendar."""

    def __init__(self, as_of: object):
        self.as_of = as_of
        super().__init__(f"Reference date {as_of} is too close to the calendar limits for a timeline")
