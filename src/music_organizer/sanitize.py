"""File and directory name sanitization for filesystem safety.

The illegal character set is the Windows one, a superset of POSIX.
"""

import re

from loguru import logger

log = logger.bind(stage="sanitize")

_INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def remove_double_spaces(value: str) -> str:
    """Collapse runs of spaces into a single space."""
    return re.sub(r"  +", " ", value)


def sanitize_file_name(file_name: str) -> str:
    """Sanitize a file name component (not a full path).

    Replaces illegal characters with '-'. The extension is kept as-is.
    """
    return _INVALID_CHARS.sub("-", file_name)


def sanitize_directory_name(name: str, default: str) -> str:
    """Sanitize a single directory name component.

    Blank input yields default. Otherwise illegal characters become '_',
    '; ' separators become ', ', repeated dots collapse, trailing dots are
    stripped (Windows drops them silently), and double spaces collapse.
    """
    if not name or not name.strip():
        return default

    sanitized = _INVALID_CHARS.sub("_", name)
    sanitized = sanitized.replace("; ", ", ")
    sanitized = re.sub(r"\.{2,}", ".", sanitized)
    sanitized = remove_double_spaces(sanitized).strip().rstrip(".").rstrip()

    if not sanitized:
        log.debug(f"Directory name '{name}' sanitized to nothing, using '{default}'")
        return default
    return sanitized
