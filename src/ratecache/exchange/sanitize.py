"""Deterministic response sanitization.

Independent evaluators of the same fetch must agree byte-for-byte on the
sanitized response, so everything that varies per request (dates, request
ids, rate-limit counters, cookies) is stripped. Only a fixed allow-list of
security headers survives, with normalized names and values.
"""

from collections.abc import Mapping
from dataclasses import dataclass

ALLOWED_HEADERS: frozenset[str] = frozenset(
    {
        "content-security-policy",
        "referrer-policy",
        "strict-transport-security",
        "x-content-type-options",
        "x-frame-options",
    }
)


@dataclass(frozen=True)
class SanitizedResponse:
    """A response reduced to its deterministic parts."""

    status: int
    headers: tuple[tuple[str, str], ...]
    body: bytes


def sanitize_headers(headers: Mapping[str, str]) -> tuple[tuple[str, str], ...]:
    """Keep allow-listed headers, lowercased and sorted by name."""
    kept = {
        name.strip().lower(): str(value).strip()
        for name, value in headers.items()
        if name.strip().lower() in ALLOWED_HEADERS
    }
    return tuple(sorted(kept.items()))


def sanitize_response(status: int, headers: Mapping[str, str], body: bytes) -> SanitizedResponse:
    """Pure function of the raw response; no clock, no I/O."""
    return SanitizedResponse(status=status, headers=sanitize_headers(headers), body=body)
