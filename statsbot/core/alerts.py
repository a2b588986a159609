"""Structured logging alerts for failed commands."""

import logging

logger = logging.getLogger("statsbot.alerts.commands")


def alert_command_failed(
    command: str, accounts: list[str], status_code: int | None
) -> None:
    """Log a single grep-able line when a command fails at its boundary."""
    logger.warning(
        "COMMAND_FAILED command=%s accounts=%s status=%s",
        command,
        ",".join(accounts) or "-",
        status_code if status_code is not None else "-",
    )


def alert_profile_missing(usernames: list[str], status_code: int) -> None:
    """Log when a comparison names an account GitHub does not know."""
    logger.warning(
        "PROFILE_MISSING accounts=%s status=%d",
        ",".join(usernames),
        status_code,
    )
