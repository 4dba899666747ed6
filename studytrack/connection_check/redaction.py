"""Redaction of secrets from messages and log records."""

import logging
import re
from collections.abc import Iterable, Mapping

REDACTED = "[REDACTED]"

SENSITIVE_PATTERNS = (
    re.compile(r"(postgres(?:ql)?://)[^@\s/]+@", re.IGNORECASE),
    re.compile(
        r"\b(password|passwd|api[_-]?key|key|token|secret)([=:]\s*)[^\s&\"',;]+",
        re.IGNORECASE,
    ),
    re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
)


def _secret_values(secrets: Iterable[str | None]) -> list[str]:
    # Longest first so a secret embedded in another is replaced whole
    values = {secret for secret in secrets if secret and len(secret) >= 4}
    return sorted(values, key=len, reverse=True)


def redact_secrets(text: str, secrets: Iterable[str | None] = ()) -> str:
    """Replace known secret values and credential patterns in text."""
    for secret in _secret_values(secrets):
        text = text.replace(secret, REDACTED)

    text = SENSITIVE_PATTERNS[0].sub(rf"\1{REDACTED}@", text)
    text = SENSITIVE_PATTERNS[1].sub(rf"\1\2{REDACTED}", text)
    text = SENSITIVE_PATTERNS[2].sub(rf"\1{REDACTED}", text)
    return text


def redact_details(
    details: Mapping[str, object] | None, secrets: Iterable[str | None] = ()
) -> dict[str, object] | None:
    """Redact every string value of a details mapping, recursively."""
    if details is None:
        return None

    secret_list = list(secrets)
    redacted: dict[str, object] = {}
    for key, value in details.items():
        if isinstance(value, str):
            redacted[key] = redact_secrets(value, secret_list)
        elif isinstance(value, Mapping):
            redacted[key] = redact_details(value, secret_list)
        else:
            redacted[key] = value
    return redacted


class SecretRedactingFilter(logging.Filter):
    """Logging filter that scrubs credentials from rendered log messages."""

    def __init__(self, secrets: Iterable[str | None] = ()) -> None:
        """Initialize filter with secret values known up front."""
        super().__init__()
        self.secrets = _secret_values(secrets)

    def add_secrets(self, secrets: Iterable[str | None]) -> None:
        """Register more secret values to scrub."""
        self.secrets = _secret_values([*self.secrets, *secrets])

    def filter(self, record: logging.LogRecord) -> bool:
        """Render the record message once and redact it in place."""
        message = record.getMessage()
        record.msg = redact_secrets(message, self.secrets)
        record.args = None
        if record.exc_info:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
            record.exc_info = None
        if record.exc_text:
            record.exc_text = redact_secrets(record.exc_text, self.secrets)
        if record.stack_info:
            record.stack_info = redact_secrets(record.stack_info, self.secrets)
        return True
