"""Exception classes shared by the API server and the thumbnail worker.

Every class carries a stable ``code`` and the HTTP status the API maps it to.
"""


class FilesManagerError(Exception):
    """
    Base exception class for all files-manager errors.
    """
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(FilesManagerError):
    """
    Raised when a token is missing, unknown or expired where one is required,
    or when login credentials are invalid.
    """
    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(FilesManagerError):
    """
    Raised when an entity is missing or is private to another user.
    The two cases are deliberately indistinguishable.
    """
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class ValidationError(FilesManagerError):
    """
    Raised for malformed input: missing field, invalid enum value, invalid parent.
    """
    code = "VALIDATION_ERROR"
    status_code = 400


class FolderHasNoContentError(ValidationError):
    """
    Raised when content is requested for a folder.
    """

    def __init__(self, message: str = "A folder doesn't have content"):
        super().__init__(message)


class UserAlreadyExistsError(ValidationError):
    """
    Raised when attempting to register an email that already exists.
    """

    def __init__(self, message: str = "Already exist"):
        super().__init__(message)


class TransientBackendError(FilesManagerError):
    """
    Raised when the session, metadata, content or queue backend is unreachable
    or timed out. Callers may retry.
    """
    code = "BACKEND_UNAVAILABLE"
    status_code = 503

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message)


class PermanentProcessingError(FilesManagerError):
    """
    Raised by the thumbnail worker when a job references a missing file,
    a file of another owner, or a non-image. Never retried.
    """
    code = "PERMANENT_PROCESSING_ERROR"
    status_code = 422
