"""Exception and warning types raised by wvflib."""

__all__ = ["ConfigurationError", "DomainWarning"]


class ConfigurationError(ValueError):
    """Invalid optical system configuration.

    Raised before any computation starts, and never retried. The message
    always carries the offending values.
    """


class DomainWarning(UserWarning):
    """Input outside the model's usual domain; computation still proceeds."""
