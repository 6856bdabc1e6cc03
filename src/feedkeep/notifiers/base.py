"""Abstract notifier interface using Protocol."""

from typing import Protocol


class Notifier(Protocol):
    """User-visible notice channel (toast, chat message, console)."""

    async def send_message(self, message: str, level: str = "info") -> bool:
        """Show a short message to the user.

        Args:
            message: Text to show.
            level: "info" or "error".

        Returns:
            bool: True if the message was delivered.
        """
        ...
