"""Custom exceptions for assetstamp."""


class AssetStampError(Exception):
    """Base exception for all assetstamp errors."""

    pass


class ResolutionError(AssetStampError):
    """Raised when the identity of a compiled unit cannot be determined."""

    def __init__(
        self, unit: str, reason: str = "", attempts: list[str] | None = None
    ):
        self.unit = unit
        self.reason = reason
        self.attempts = list(attempts or [])
        message = f"Cannot resolve version tag for {unit}"
        if reason:
            message += f": {reason}"
        if self.attempts:
            message += f". Attempts: {'; '.join(self.attempts)}"
        super().__init__(message)


class InvalidAssetPathError(AssetStampError, ValueError):
    """Raised when a base asset path is empty or not a string."""

    pass


class ManifestError(AssetStampError):
    """Raised when a build manifest exists but cannot be read or validated."""

    pass
