"""Notifier that reports through the structured log."""

import structlog

logger = structlog.get_logger()


class LogNotifier:
    """Writes user notices to the log, the CLI's only user-facing surface."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    async def send_message(self, message: str, level: str = "info") -> bool:
        self.messages.append((level, message))
        if level == "error":
            logger.error("Notice", message=message)
        else:
            logger.info("Notice", message=message)
        return True
