"""Exceptions raised by the decision-support queries."""


class EngineDesyncError(AssertionError):
    """A query was made at a decision point where it is not allowed.

    This means the caller's turn engine disagrees with the game rules; it
    is a bug, never caught inside this package.
    """


class AgentHelperError(Exception):
    """Base class for failures that can happen from valid game states."""


class CannotAgariError(AgentHelperError):
    """No legal win in the requested mode, or no winning tile."""


class NotAHoraHandError(CannotAgariError):
    """The assembled hand does not score as a valid win."""


class InsufficientDrawsError(AgentHelperError):
    """Not enough self-draws remain for a lookahead."""


class HandAlreadyCompleteError(AgentHelperError):
    """The hand is already complete, there is no discard to optimize."""


class SearchError(AgentHelperError):
    """The expected-value search cannot handle this hand."""
