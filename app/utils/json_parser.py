"""
Helpers for parsing JSON text scanned from QR codes.
"""

import json
from typing import Optional, Any


def safe_parse_json(raw_text: str | bytes) -> Optional[Any]:
    """Parse JSON text or UTF-8 bytes safely. Returns None on error."""
    try:
        if isinstance(raw_text, bytes):
            raw_text = raw_text.decode("utf-8")
        return json.loads(raw_text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError, RecursionError):
        return None


def looks_like_json_object(raw_text: str) -> bool:
    """Cheap check before parsing: scanned codes that are plain URLs or IDs fail fast."""
    return raw_text.lstrip().startswith("{")
