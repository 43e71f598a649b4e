"""Utility helper functions for the vault."""

import re

_UNSAFE_LABEL_CHARS = re.compile(r'[^A-Za-z0-9._-]+')


def format_bytes(size_bytes: int) -> str:
    """
    Format a byte count with the largest fitting unit (B, KB, MB, GB).

    Units are 1024-based; anything past GB stays in GB.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.50 MB", "512 B")
    """
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024

    if size_bytes >= gb:
        return f"{size_bytes / gb:.2f} GB"
    if size_bytes >= mb:
        return f"{size_bytes / mb:.2f} MB"
    if size_bytes >= kb:
        return f"{size_bytes / kb:.2f} KB"
    return f"{size_bytes} B"


def part_label(file_name: str, part_index: int) -> str:
    """
    Label handed to the blob backend for one chunk, e.g. ``report.pdf.part0``.
    """
    safe_name = _UNSAFE_LABEL_CHARS.sub("_", file_name).strip("._") or "file"
    return f"{safe_name}.part{part_index}"
