"""Exceptions raised by the screening services."""


class ScreeningError(Exception):
    """Base class for screening failures."""


class PlateCatalogError(ScreeningError):
    """The plate catalog cannot satisfy a request or is malformed."""


class InvalidSessionCallError(ScreeningError):
    """A session operation was called in a state that does not allow it."""


class SessionNotFoundError(ScreeningError):
    """No active screening session exists for the user."""


class BlankAnswerError(ScreeningError):
    """An empty answer was submitted."""


class ResultDeliveryError(ScreeningError):
    """A downstream collaborator failed while receiving a completed result."""

    def __init__(self, stage: str) -> None:
        super().__init__(f"Failed to deliver result: {stage}")
        self.stage = stage
