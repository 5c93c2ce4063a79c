from datetime import timezone
from typing import Optional
from dateutil.parser import parse
from portfolio.domain.invariants.exceptions import StaleSection


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def parse_if_match(header: Optional[str]) -> Optional[int]:
    """
    Extract the section version from an If-Match header.

    Accepts `"3"`, `W/"3"` and bare `3`. `*` means "any version".
    """
    if not header:
        return None

    value = header.split(",")[0].strip()
    if value == "*":
        return None
    if value.startswith("W/"):
        value = value[2:]

    try:
        return int(value.strip('"'))
    except ValueError:
        raise ValueError("Invalid If-Match header") from None


def parse_unmodified_since(header: Optional[str]):
    if not header:
        return None

    try:
        return normalize_ts(parse(header))
    except (ValueError, OverflowError) as exc:
        raise ValueError("Invalid If-Unmodified-Since header") from exc


def enforce_optimistic_lock(entity, *, expected_version=None, unmodified_since=None):
    """
    Rejects a write computed from a stale read of `entity`.

    - expected_version: revision the client last saw (If-Match)
    - unmodified_since: timestamp the client last saw (If-Unmodified-Since)

    Raises StaleSection when the stored row is newer than either marker.
    No marker means no optimistic lock was requested.
    """
    if expected_version is not None and entity.version != expected_version:
        raise StaleSection(
            f"Conflict detected. Section is at version {entity.version}, "
            f"not {expected_version}."
        )

    if unmodified_since is not None and entity.updated_at is not None:
        server_ts = normalize_ts(entity.updated_at).replace(microsecond=0)
        if server_ts > unmodified_since:
            raise StaleSection()
