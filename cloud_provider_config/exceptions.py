"""Exceptions related to cloud-provider-config."""

__all__ = [
    "ProviderConfigException",
    "InputException",
    "LookupException",
    "SerializationException",
    "GenerateException",
    "UnsupportedPlatformError",
    "DependencyNotFoundError",
]


class ProviderConfigException(Exception):
    """Generic base exception used for this library."""


class InputException(ProviderConfigException):
    """Raised when the install config is not formatted as expected."""


class LookupException(ProviderConfigException):
    """Raised when a session, account or credentials lookup fails."""


class SerializationException(ProviderConfigException):
    """Raised when an object could not be rendered to text."""


class GenerateException(ProviderConfigException):
    """Raised when a platform provider config could not be derived."""


class UnsupportedPlatformError(ProviderConfigException):
    """Raised when the selected platform has no derivation rule."""

    def __init__(self, platform: str) -> None:
        super().__init__("invalid Platform")
        self.platform = platform


class DependencyNotFoundError(ProviderConfigException):
    """Raised when a dependency of an asset has not been resolved."""
