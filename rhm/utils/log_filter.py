"""Secret masking for log messages.

The ops server logs request details and configuration errors; these patterns
keep the admin API key and bearer tokens out of the log files.
"""

from __future__ import annotations

import re

# (compiled pattern, replacement), applied in order
SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # Admin key variables and the request header
    (re.compile(r"((?:RHM_)?ADMIN_API_KEY|x-admin-api-key)\s*[=:]\s*\S+", re.IGNORECASE), r"\1=***"),
    # Any other key/token/secret assignment
    (re.compile(r"(api[_-]?key|token|secret)\s*[=:]\s*\S+", re.IGNORECASE), r"\1=***"),
    (re.compile(r"Bearer\s+\S+"), "Bearer ***"),
]


def filter_secrets(text: str) -> str:
    """Return ``text`` with every known secret replaced by ``***``."""
    for pattern, replacement in SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def mask_record(record: dict) -> None:
    """Loguru patcher that masks secrets in the formatted message."""
    record["message"] = filter_secrets(record["message"])
