"""Root of the Padplayer exception hierarchy.

Every error carries two messages: ``user_message`` for the terminal and
``technical_message`` for the log file. ``recoverable`` tells the
control thread whether it may keep handling events after the error.
"""

from typing import Optional


class PadPlayerError(Exception):
    """
    Base exception for all Padplayer errors.

    Attributes:
        user_message: Short message shown to the user
        technical_message: Detailed message for the log (defaults to user_message)
        recoverable: True if the session can continue after this error
        recovery_hint: Optional suggestion shown under the message
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.technical_message!r})"

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, if any."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
