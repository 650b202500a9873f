"""
Version parsing and comparison helpers.

Versions are ordered with packaging.version (PEP 440), which also accepts the
plain dotted "1.2" / "6.4.2" strings used by plugin manifests.
"""

from packaging.version import InvalidVersion, Version

from updater.exceptions import InvalidVersionError


def parse_version(value: str) -> Version:
    try:
        return Version(str(value).strip())
    except InvalidVersion as exc:
        raise InvalidVersionError(str(value)) from exc


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as *left* is older than, equal to, or newer than *right*."""
    a = parse_version(left)
    b = parse_version(right)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def is_newer(candidate: str, current: str) -> bool:
    return compare_versions(candidate, current) > 0


def requirement_met(required: str | None, available: str) -> bool:
    """True when *available* satisfies the minimum *required*; no requirement always passes."""
    if required is None or not str(required).strip():
        return True
    return compare_versions(required, available) <= 0
