"""Base exceptions for axwatch."""


class AxwatchError(Exception):
    """Base exception for all axwatch errors."""

    pass


class CaptureError(AxwatchError):
    """Snapshot capture process failed."""

    pass


class CaptureTimeoutError(CaptureError):
    """Snapshot capture process did not finish in time."""

    pass


class ProviderError(AxwatchError):
    """Notification provider error."""

    pass


class UnsupportedPlatformError(ProviderError):
    """No provider registered for the platform."""

    pass
