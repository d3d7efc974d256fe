from __future__ import annotations

from typing import Any, Optional


def optional_int(value: Any) -> Optional[int]:
    """Parse a form/query id; blank, non-numeric or non-ASCII digits yield None."""
    text = str(value).strip() if value is not None else ""
    if not (text.isascii() and text.isdigit()):
        return None
    try:
        return int(text)
    except ValueError:
        return None
