"""Canonicalize raw type strings and coerce defaults to the normalized type.

Type columns in the documentation are free text: ``?string``,
``array of snowflakes``, ``ISO8601 timestamp``, ``integer``. The functions
here map them onto a small vocabulary -- ``string``, ``integer``,
``boolean``, ``array``, ``object``, ``snowflake``, ``Array<T>`` or a
pass-through scalar such as ``float`` -- with nullability reported
separately instead of kept in the type.
"""

from __future__ import annotations

import re
from typing import Any, Optional

ARRAY_TYPE_RE = re.compile(r"^Array<.+>$")

ADVANCED_TYPES = frozenset({"snowflake"})

STRING_ALIASES = frozenset({
    "string",
    "str",
    "text",
    "url",
    "timestamp",
    "iso8601 timestamp",
    "iso 8601 timestamp",
    "file contents",
    "image data",
    "base64 image data",
})

SCALAR_ALIASES = {
    "int": "integer",
    "integer": "integer",
    "bool": "boolean",
    "boolean": "boolean",
}

BOOLEAN_TYPES = frozenset({"boolean", "bool"})

ABSENT_DEFAULT = "absent"


def array_of(item_type: str) -> str:
    """Wrap *item_type* as ``Array<item_type>``."""
    return f"Array<{item_type}>"


def normalize_type(raw: Optional[str]) -> tuple[str, Optional[bool]]:
    """Map a raw type token to its canonical form.

    Args:
        raw: The type text as written in the documentation. ``None`` and
            empty strings normalize to ``"string"``.

    Returns:
        A ``(type, nullable)`` tuple. ``nullable`` is ``True`` when the raw
        token carried a ``?`` marker (leading or trailing), otherwise
        ``None`` so that it is omitted from the output.
    """
    token = (raw or "").strip()
    nullable: Optional[bool] = None
    if token.startswith("?") or token.endswith("?"):
        nullable = True
        token = token.strip("?").strip()

    if not token:
        return "string", nullable
    if ARRAY_TYPE_RE.match(token):
        return token, nullable

    lowered = token.lower()
    if lowered in ADVANCED_TYPES:
        return lowered, nullable
    if lowered in STRING_ALIASES:
        return "string", nullable
    if lowered in SCALAR_ALIASES:
        return SCALAR_ALIASES[lowered], nullable
    if "array" in lowered or lowered.startswith("list of"):
        return "array", nullable
    if "object" in lowered:
        return "object", nullable
    return token, nullable


def coerce_default(raw: Optional[str], type_: str) -> Any:
    """Convert a default cell to the field's normalized type.

    Returns ``None`` (the default is omitted) when the cell is empty, reads
    ``absent``, belongs to a ``snowflake`` field, or is not a base-10
    integer for an ``integer`` field. Boolean fields map ``"true"`` to
    ``True`` and everything else to ``False``. Any other value is kept as
    text.
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text or text.lower() == ABSENT_DEFAULT or type_ == "snowflake":
        return None
    if type_ == "integer":
        try:
            return int(text, 10)
        except ValueError:
            return None
    if type_ in BOOLEAN_TYPES:
        return text.lower() == "true"
    return text


def parse_required(raw: Optional[str]) -> Optional[bool]:
    """Read a ``Required`` cell: yes/true, no/false, or unknown (``None``)."""
    if raw is None:
        return None
    text = raw.strip().lower()
    if text in ("true", "yes"):
        return True
    if text in ("false", "no"):
        return False
    return None


def uri_parameter_type(token: str, snowflakes: frozenset[str] | set[str] | list[str]) -> str:
    """Type of a URL token: ``snowflake`` for known identifier tokens, else ``string``."""
    return "snowflake" if token in snowflakes else "string"
