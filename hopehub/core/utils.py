"""
Shared helpers for text cleanup and display formatting.
"""

from typing import Any, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def clean(value: Any) -> str:
    """Return value as a stripped string ('' for None)."""
    if value is None:
        return ""
    return str(value).strip()


def is_blank(value: Any) -> bool:
    return not clean(value)


def clean_or_none(value: Any) -> Optional[str]:
    """
    Strip an optional text field, storing blanks as None.

    Examples:
        >>> clean_or_none("  Kandy ")
        'Kandy'
        >>> clean_or_none("   ") is None
        True
    """
    text = clean(value)
    return text or None


def clean_items(items: Iterable[Any]) -> List[str]:
    """Trim each item and drop the blank ones, keeping order."""
    return [clean(item) for item in items or [] if not is_blank(item)]


def prepend_record(records: Iterable[T], record: T) -> List[T]:
    """Return a new newest-first list with record at the front."""
    return [record, *records]


def format_file_size(num_bytes: int) -> str:
    """
    Format a byte count for display.

    Args:
        num_bytes: Size in bytes

    Returns:
        Human-readable size, e.g. "2.5 MB"

    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(2621440)
        '2.5 MB'
    """
    if num_bytes <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    while i < len(units) - 1 and num_bytes >= 1024 ** (i + 1):
        i += 1
    value = round(num_bytes / (1024 ** i), 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[i]}"
