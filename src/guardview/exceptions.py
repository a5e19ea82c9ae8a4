"""
Exception classes for the guardview dashboard.

This module defines the errors raised by the dashboard core:
- TerminalSetupError: Terminal could not be switched into dashboard mode
- ChannelClosedError: Value sent into a channel that was already closed
- IncompleteSnapshotError: Render requested before every facet arrived
- ConfigError: Invalid dashboard configuration

Per project patterns:
- Inherit from Exception for base exception type
- Store context data in attributes for error handling
- Include descriptive message with relevant details
"""


class TerminalSetupError(Exception):
    """
    Raised when acquiring the terminal fails before the render loop starts.

    Whatever part of the terminal state was already acquired has been
    released by the time this propagates.

    Attributes:
        step: Setup step that failed (e.g., "raw_mode", "alternate_screen")
        cause: Underlying exception
    """

    def __init__(self, step: str, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"Terminal setup failed during {step}: {cause}")


class ChannelClosedError(Exception):
    """
    Raised when a producer sends into a channel after closing it.

    Attributes:
        name: Channel name
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Channel '{name}' is closed")


class IncompleteSnapshotError(Exception):
    """
    Raised when a frame is rendered from a snapshot with absent facets.

    Attributes:
        missing: Names of the facets that have not been delivered yet
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            f"Snapshot is incomplete, missing: {', '.join(missing)}"
        )


class ConfigError(Exception):
    """
    Raised when the dashboard configuration is invalid.

    Attributes:
        field: Configuration field at fault
        reason: Why the value was rejected
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for {field}: {reason}")
