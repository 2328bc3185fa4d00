"""Uid generation and path helpers for the datastore."""

import random
import re
import string
from datetime import datetime

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.]+")
_BASE36_DIGITS = string.digits + string.ascii_lowercase
_RANDOM_SPACE = 10**15

SIDECAR_SUFFIX = ".meta.yml"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def sanitize_filename(name: str) -> str:
    """Replace every run of characters outside [A-Za-z0-9_.] with '_'."""
    return _UNSAFE_CHARS.sub("_", name)


def generate_uid(
    original_name: str,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> str:
    """Return a date-partitioned uid such as ``2024/01/31/1x9k2m_report.pdf``."""
    now = now or datetime.now()
    token = _to_base36((rng or random).randrange(_RANDOM_SPACE))
    return f"{now.strftime('%Y/%m/%d/')}{token}_{sanitize_filename(original_name)}"


def full_path(root_path: str | None, uid: str) -> str:
    """Join the configured root path and a uid into the backend path."""
    segments = (segment.strip("/") for segment in (root_path, uid) if segment)
    return "/".join(segment for segment in segments if segment)


def split_path(path: str) -> tuple[str, str]:
    """Split a backend path into (directory, filename)."""
    directory, _, filename = path.rpartition("/")
    return directory, filename


def strip_sidecar_suffix(path: str) -> str:
    if path.endswith(SIDECAR_SUFFIX):
        return path[: -len(SIDECAR_SUFFIX)]
    return path


def sidecar_path(path: str) -> str:
    """Path of the legacy metadata file that sits next to ``path``."""
    return f"{strip_sidecar_suffix(path)}{SIDECAR_SUFFIX}"
