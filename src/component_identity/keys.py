"""Report key helpers.

A report key is ``<project key><key separator><component path>``, e.g.
``project:src/main/Foo.java``. The project key alone denotes the project
root. Retired report formats inserted module keys instead of module paths,
e.g. ``project:module1:src/main/Foo.java``.
"""

from typing import Optional

KEY_SEPARATOR = ":"
PATH_SEPARATOR = "/"


def create_effective_key(
    root_key: str, path: Optional[str], key_separator: str = KEY_SEPARATOR
) -> str:
    """Return the report key of ``path`` inside the project ``root_key``."""
    if not path:
        return root_key
    return f"{root_key}{key_separator}{path}"


def relative_part(
    root_key: str, key: str, key_separator: str = KEY_SEPARATOR
) -> Optional[str]:
    """Return the component part of ``key``, or ``None``.

    ``None`` is returned for the root key itself and for keys that do not
    belong to the project.
    """
    prefix = f"{root_key}{key_separator}"
    if not key.startswith(prefix):
        return None
    return key[len(prefix):]


def split_path(path: str, path_separator: str = PATH_SEPARATOR) -> list[str]:
    return path.split(path_separator)


def has_empty_segment(path: str, path_separator: str = PATH_SEPARATOR) -> bool:
    """True for empty paths and leading, trailing or doubled separators."""
    return any(segment == "" for segment in split_path(path, path_separator))


def is_segment_prefix(prefix: list[str], segments: list[str]) -> bool:
    """True when ``prefix`` equals the first ``len(prefix)`` segments.

    Comparison is segment by segment, so ``["module1"]`` is not a prefix of
    ``["module1_extra"]``.
    """
    return len(prefix) <= len(segments) and segments[: len(prefix)] == prefix
