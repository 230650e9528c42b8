"""Custom exceptions for the application."""


class AppError(Exception):
    """Base exception for all application-specific exceptions."""

    pass


class ServiceError(AppError):
    """Raised when a service operation fails due to business logic."""

    pass


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    pass


class BrowserSessionError(ServiceError):
    """Raised when the browser session cannot be started or used at all."""

    pass


class MergeError(ServiceError):
    """Raised when the merged document cannot be written."""

    pass


class DocumentLookupError(ServiceError):
    """Raised when no document can be retrieved for one roll number."""

    def __init__(self, roll_number: str, message: str):
        super().__init__(f"{roll_number}: {message}")
        self.roll_number = roll_number


class ResultNotFoundError(DocumentLookupError):
    """Raised when the portal shows no result for a roll number."""

    pass


class DocumentLinkNotFoundError(DocumentLookupError):
    """Raised when a result page carries no document link."""

    pass


class DownloadError(DocumentLookupError):
    """Raised when the document download or write fails."""

    pass
