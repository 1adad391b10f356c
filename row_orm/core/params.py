"""Parameter placeholder rendering.

Type mappers format placeholders in ``:name`` style, possibly wrapped in a
dialect expression (``ST_GeomFromText(:location)``, ``(:status)::user_status``).
The statement layer may need another driver paramstyle; conversion keeps
string literals and PostgreSQL ``::typecast`` syntax intact.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Matches :name but not ::typecast and not inside words
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")

_REPLACEMENTS = {
    "pyformat": r"%(\1)s",
    "format": "%s",
    "qmark": "?",
}


def named_placeholder(param_name: str) -> str:
    """The plain bound-parameter placeholder for *param_name*."""
    return f":{param_name}"


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL text (or a single placeholder expression) with :name parameters.
        paramstyle: 'named' (no conversion), 'pyformat' (%(name)s),
            'format' (%s) or 'qmark' (?).

    Returns:
        Text with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    if paramstyle not in _REPLACEMENTS:
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")
    return _convert(sql, paramstyle)


@lru_cache(maxsize=256)
def _convert(sql: str, paramstyle: str) -> str:
    """Convert :name params outside string literals."""
    replacement = _REPLACEMENTS[paramstyle]
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_PARAM_PATTERN.sub(replacement, sql[last_end:start]))
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(_PARAM_PATTERN.sub(replacement, sql[last_end:]))

    return "".join(parts)
