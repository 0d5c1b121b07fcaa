"""Domain-specific errors for zmkctl."""


class ZmkctlError(Exception):
    """Base error for zmkctl."""


class ConfigError(ZmkctlError):
    """Raised when the user configuration file cannot be read."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration file does not conform to schema."""


class TransportError(ZmkctlError):
    """Base transport error."""


class DeviceNotFound(TransportError):
    """Raised when no device with the requested serial can be opened."""


class TransportIOError(TransportError):
    """Raised when enumeration or a feature report exchange fails."""


class MalformedReport(ZmkctlError):
    """Raised when a report buffer does not match its declared layout."""


class EncodingError(ZmkctlError):
    """Raised when a device or caller string cannot be converted."""


class InvalidArgument(ZmkctlError):
    """Raised when caller input is out of shape or out of range."""


class ResultBuildError(ZmkctlError):
    """Raised when a result record cannot be fully populated."""
