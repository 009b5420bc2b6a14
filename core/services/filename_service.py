"""Build filesystem-safe file names from photo labels."""

from __future__ import annotations

import os
import re

from core.config import DEFAULT_MAX_FILE_NAME_LENGTH
from core.errors import FileNameBudgetError

ELLIPSIS = "..."
# Characters rejected by at least one mainstream filesystem, plus control chars.
_INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_file_name(name: str) -> str:
    """Replace every character that is illegal in a file name with "_"."""
    return _INVALID_CHARS.sub("_", name)


def sort_prefix(ordinal_index: int, total_count: int) -> str:
    """Zero-padded ordinal followed by ". ", e.g. ``007. `` for 7 of 150."""
    width = len(str(total_count))
    return str(ordinal_index).zfill(width) + ". "


def duplicate_suffix(duplicate_index: int) -> str:
    """Return `` (n)`` for positive `duplicate_index`, else an empty string."""
    return f" ({duplicate_index})" if duplicate_index > 0 else ""


def build_file_name(
    label: str,
    extension: str,
    duplicate_index: int = 0,
    ordinal_index: int = 0,
    total_count: int = 0,
    add_sort_prefix: bool = False,
    max_length: int = DEFAULT_MAX_FILE_NAME_LENGTH,
) -> str:
    """Return the bare file name for `label`, never longer than `max_length`.

    Args:
        label: Text used as the base name; truncated with "..." when too long.
        extension: Original extension including the dot, kept verbatim.
        duplicate_index: Collision counter; 0 means no suffix.
        ordinal_index: 1-based position used for the sort prefix.
        total_count: Batch size; sets the zero padding of the prefix.
        add_sort_prefix: Whether to prepend the ordinal prefix.
        max_length: Upper bound for the full name.

    Raises:
        FileNameBudgetError: the label needs truncating but fewer than three
            characters remain for it.
    """
    suffix = duplicate_suffix(duplicate_index)
    prefix = sort_prefix(ordinal_index, total_count) if add_sort_prefix else ""
    budget = max_length - len(extension) - len(suffix) - len(prefix)

    if len(label) > budget:
        if budget < len(ELLIPSIS):
            raise FileNameBudgetError(budget)
        base = label[: budget - len(ELLIPSIS)] + ELLIPSIS
    else:
        base = label

    return prefix + sanitize_file_name(base) + suffix + extension


def build_candidate_path(
    base_path: str,
    label: str,
    extension: str,
    duplicate_index: int = 0,
    ordinal_index: int = 0,
    total_count: int = 0,
    add_sort_prefix: bool = False,
    max_length: int = DEFAULT_MAX_FILE_NAME_LENGTH,
) -> str:
    """Join `base_path` with the name produced by `build_file_name`."""
    name = build_file_name(
        label,
        extension,
        duplicate_index=duplicate_index,
        ordinal_index=ordinal_index,
        total_count=total_count,
        add_sort_prefix=add_sort_prefix,
        max_length=max_length,
    )
    return os.path.join(base_path, name)
