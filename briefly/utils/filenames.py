"""Download filenames and Content-Disposition headers."""

from __future__ import annotations

import re
from urllib.parse import quote

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def notes_filename(title: str, suffix: str = "study_notes") -> str:
    """
    Build a PDF filename from a note title.

    Every non-alphanumeric character becomes "_".

    Example:
        >>> notes_filename("Cell Biology: 101")
        'Cell_Biology__101_study_notes.pdf'
    """
    return f"{_NON_ALNUM.sub('_', title)}_{suffix}.pdf"


def content_disposition(filename: str) -> str:
    """
    Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name.
    """
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    ascii_name = ascii_name.replace('"', "_").replace("\\", "_")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename, safe='')}"
