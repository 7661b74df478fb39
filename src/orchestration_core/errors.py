class OrchestrationError(Exception):
    """Base exception for orchestration_core."""


class ValidationError(OrchestrationError):
    """State/config is invalid for the requested operation."""


class NotRunningError(OrchestrationError):
    """Requested operation requires a running server, but it isn't running."""


class ResetError(OrchestrationError):
    """A world reset could not be carried through."""


class ResetInProgressError(ResetError):
    """Another reset already holds the in-flight slot."""


class ConfigurationError(ResetError):
    """server.properties could not be read or rewritten."""


class ScriptGenerationError(ResetError):
    """The restart script could not be written or made executable."""


class LaunchError(ResetError):
    """The restart script could not be started as a detached process."""
