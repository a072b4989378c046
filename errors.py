# errors.py
from typing import Optional


# --- Storage errors ---
class StorageError(Exception):
    """Base class for failures of the task document."""


class StorageInitError(StorageError):
    """The data directory or document could not be created or verified."""


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


# --- API errors ---
class APIError(Exception):
    """
    An error that is rendered to the client as a JSON body.
    `error` is the human readable message, `details` the underlying cause (server errors only).
    """
    status_code = 500

    def __init__(self, error: str, details: Optional[str] = None):
        super().__init__(error)
        self.error = error
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(APIError):
    status_code = 400

    def __init__(self, error: str = "Invalid task data"):
        super().__init__(error)


class NotFoundError(APIError):
    status_code = 404

    def __init__(self, error: str = "Task not found"):
        super().__init__(error)


class ServerError(APIError):
    status_code = 500
