import re
from typing import Any, List, Mapping, Optional, Sequence

_DIGIT_RUN = re.compile(r"(\d+)")


def get_string(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def get_bool(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def get_string_list(data: Mapping[str, Any], key: str) -> List[str]:
    """
    Read a JSON array of strings.

    Anything that is not an array (including an object) counts as absent.
    Non-string elements are dropped individually.
    """
    value = data.get(key)
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def get_version_triple(data: Mapping[str, Any], key: str) -> str:
    """
    Join a ``[major, minor, patch]`` integer array with dots.

    Returns an empty string for anything but exactly three integers.
    """
    value = data.get(key)
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return ""
    # bool is a subclass of int but is not a version component
    if any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        return ""
    return ".".join(str(v) for v in value)


def build_requirements(
    min_bot_version: str,
    max_bot_version: str,
    min_python_version: str,
    declared: Sequence[str],
) -> List[str]:
    """
    Build the human-readable requirement list shown for a cog.

    Order: interpreter requirement, bot version bound(s), then the declared
    requirements as given. ``"0.0.0"`` must already be normalized to empty.
    """
    requirements: List[str] = []
    if min_python_version:
        requirements.append(f"Python>={min_python_version}")

    if min_bot_version and min_bot_version == max_bot_version:
        requirements.append(f"Bot=={min_bot_version}")
    else:
        if min_bot_version:
            requirements.append(f"Bot>={min_bot_version}")
        if max_bot_version:
            requirements.append(f"Bot<={max_bot_version}")

    requirements.extend(declared)
    return requirements


def contains_text(value: Optional[str], keyword: str) -> bool:
    """Case-insensitive substring match."""
    if not value:
        return False
    return keyword.lower() in value.lower()


def natural_sort_key(value: str) -> tuple:
    """
    Sort key comparing digit runs by numeric value, ignoring case.

    ``re.split`` with a capturing group puts digit runs at odd positions,
    so element types line up between any two keys.
    """
    parts = _DIGIT_RUN.split(value.casefold())
    return tuple(int(part) if i % 2 else part for i, part in enumerate(parts))
