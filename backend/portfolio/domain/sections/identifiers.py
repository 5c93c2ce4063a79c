import re
import random
import string
import time
import uuid
from datetime import datetime, timezone

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_BASE36 = string.digits + string.ascii_lowercase


def generate_slug(title: str) -> str:
    """
    "My Certs! 2024" -> "my-certs-2024"
    """
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def _random_base36(length: int) -> str:
    return "".join(random.choice(_BASE36) for _ in range(length))


def generate_entry_id() -> str:
    try:
        return f"entry_{uuid.uuid4()}"
    except NotImplementedError:
        # os.urandom has no entropy source on this platform
        return f"entry_{int(time.time() * 1000)}_{_random_base36(9)}"


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T10:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
