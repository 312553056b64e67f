"""Exceptions."""


class ConfigurationError(RuntimeError):
    """A required configuration parameter is missing or invalid."""


class ConfigStoreUnavailable(RuntimeError):
    """The configuration backend could not be read or written."""


class VerificationFailed(RuntimeError):
    """A signed token could not be verified."""


class MalformedToken(VerificationFailed):
    """The token is not a well-formed compact signed token."""


class SignatureInvalid(VerificationFailed):
    """The token signature does not match the configured key."""


class UnsupportedAlgorithm(VerificationFailed):
    """The token header names an algorithm that is not allowed."""
