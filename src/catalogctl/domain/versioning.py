"""Version comparison policy and entity-tag encoding.

Every mutation path classifies its attempt here and nowhere else.
INVARIANT: only ``VersionCheck.MATCH`` authorizes a write, and the
authorized next version is always ``expected + 1``.
"""

from __future__ import annotations

import re
from enum import StrEnum

INITIAL_VERSION = 1

_ETAG_RE = re.compile(r'^(?:W/)?"?(\d+)"?$')


class VersionCheck(StrEnum):
    """Outcome of comparing a caller's expected version to the stored one."""

    ABSENT = "absent"
    MATCH = "match"
    MISMATCH = "mismatch"


def classify(expected_version: int, current_version: int | None) -> VersionCheck:
    """Classify a mutation attempt.

    Total over its inputs: an absent entity is ``ABSENT`` whatever the
    caller expected, and any expected value that is not exactly the
    stored version (including non-positive ones) is ``MISMATCH``.

    Examples:
        >>> classify(1, None)
        <VersionCheck.ABSENT: 'absent'>
        >>> classify(2, 2)
        <VersionCheck.MATCH: 'match'>
        >>> classify(1, 2)
        <VersionCheck.MISMATCH: 'mismatch'>
    """
    if current_version is None:
        return VersionCheck.ABSENT
    if expected_version == current_version:
        return VersionCheck.MATCH
    return VersionCheck.MISMATCH


def next_version(expected_version: int) -> int:
    """The version a successful write at *expected_version* produces."""
    return expected_version + 1


def format_etag(version: int) -> str:
    """Render *version* as a strong entity tag, e.g. ``'"3"'``."""
    return f'"{version}"'


def parse_etag(token: str | int) -> int:
    """Parse an If-Match style token back into a version number.

    Accepts ``3``, ``"3"``, ``'"3"'`` and weak tags ``'W/"3"'``.

    Raises:
        ValueError: If *token* does not encode a positive integer.
    """
    if isinstance(token, bool):
        raise ValueError(f"Invalid version token: {token!r}")
    if isinstance(token, int):
        version = token
    else:
        match = _ETAG_RE.match(token.strip())
        if match is None:
            raise ValueError(f"Invalid version token: {token!r}")
        version = int(match.group(1))
    if version < INITIAL_VERSION:
        raise ValueError(f"Version must be >= {INITIAL_VERSION}, got {version}")
    return version
