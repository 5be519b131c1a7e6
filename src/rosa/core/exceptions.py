"""Custom exceptions for the ROSA CLI."""


class RosaError(Exception):
    """Base exception for all ROSA CLI errors."""


class ConfigurationError(RosaError):
    """Configuration-related errors."""


class ValidationError(RosaError):
    """Invalid flag combination or value detected before any remote call."""


class ClusterNotFoundError(RosaError):
    """No cluster matches the given identifier or name."""


class ClusterNotReadyError(RosaError):
    """Cluster exists but is not in the ready state."""


class OIDCConfigNotFoundError(RosaError):
    """OIDC config does not exist."""


class OIDCConfigInUseError(RosaError):
    """OIDC config is still referenced by at least one cluster."""


class OCMError(RosaError):
    """OpenShift Cluster Manager API request failed."""

    def __init__(self, message: str, status_code: int | None = None, reason: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class AWSError(RosaError):
    """AWS operation failed."""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code
