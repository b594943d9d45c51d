"""Exception types shared across the service."""


class MultichatError(Exception):
    """Base class for all Multichat errors."""


class ConfigurationError(MultichatError):
    """An agent or provider is not usable as configured.

    Raised for unknown agent ids, providers without an API key, and
    producers that have no adapter.
    """


class ProviderError(MultichatError):
    """A provider call failed while opening or reading its stream.

    Args:
        message: Human-readable error description.
        model: The ``producer:model`` that failed, used as a prefix.
    """

    def __init__(self, message: str, *, model: str = "") -> None:
        self.model = model
        self.reason = message
        full = f"[{model}] {message}" if model else message
        super().__init__(full)


class ComparisonError(MultichatError):
    """A comparison request cannot be run (rejected before streaming)."""
