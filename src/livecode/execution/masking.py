"""Redaction of credentials from database error messages."""

from __future__ import annotations

from livecode.execution.base import ExecutionConfig

REDACTION_MARKER = "[REDACTED]"
_FALLBACK_MARKER = "***"
_MIN_MASKED_USER_LENGTH = 3


def mask_credentials(message: str, config: ExecutionConfig) -> str:
    """Remove the configured user and password from an error message.

    The password is replaced first, wherever it occurs. The user is only
    replaced where it reads like a login (``user@host``, ``'user'`` or
    ``"user"``), and only when longer than two characters.

    Args:
        message: Error text produced by a database client.
        config: Driver configuration holding ``user`` and ``password``.

    Returns:
        The message with credentials replaced by a redaction marker.
    """

    password = config.get("password", "")
    if password:
        marker = REDACTION_MARKER if password not in REDACTION_MARKER else _FALLBACK_MARKER
        message = _strip(message.replace(password, marker), password)

    user = config.get("user", "")
    if len(user) >= _MIN_MASKED_USER_LENGTH:
        message = message.replace(f"{user}@", f"{REDACTION_MARKER}@")
        for quote in ("'", '"'):
            message = message.replace(f"{quote}{user}{quote}", f"{quote}{REDACTION_MARKER}{quote}")
        if password:
            message = _strip(message, password)
    return message


def _strip(message: str, secret: str) -> str:
    # Replacement can splice a new occurrence out of the surrounding text.
    while secret in message:
        message = message.replace(secret, "")
    return message
