class TrackerError(Exception):
    """Base error. `status_code` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message}


class ValidationError(TrackerError):
    status_code = 400


class NotFoundError(TrackerError):
    status_code = 404


class StorageError(TrackerError):
    status_code = 500


def error_for_status(status_code: int, message: str) -> TrackerError:
    """Map an HTTP status from the API back onto the error taxonomy."""
    if status_code == 400:
        return ValidationError(message)
    if status_code == 404:
        return NotFoundError(message)
    return StorageError(message)
