class SignoffError(Exception):
    """Base error for the dashboard client."""


class ValidationError(SignoffError):
    """A mutation was rejected before any state changed."""


class UploadError(SignoffError):
    """The object store refused or failed an upload."""
