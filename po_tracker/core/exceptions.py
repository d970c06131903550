class POTrackerError(Exception):
    """Base exception for the PO process tracker."""

    status_code = 500


class NotFoundError(POTrackerError):
    """Raised when a referenced item, purchase order or order line does not exist."""

    status_code = 404


class InvalidArgumentError(POTrackerError):
    """Raised when an argument is outside the accepted range (e.g. stage index)."""

    status_code = 400


class ConflictError(POTrackerError):
    """Raised when a write would violate a uniqueness rule."""

    status_code = 409


class StageIndexError(InvalidArgumentError):
    """Raised when a stage index falls outside the process stage catalog."""

    def __init__(self, stage_index: int, stage_count: int):
        self.stage_index = stage_index
        self.stage_count = stage_count
        super().__init__("Invalid stage index")
