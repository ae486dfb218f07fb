"""Delimited record (CSV) encoding and decoding.

Fields are sanitized before encoding: a value that starts with "=", "+" or
"-" gets a leading space so spreadsheet software opening the output does
not evaluate it as a formula.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Iterator
from typing import Any

__all__ = ["FORMULA_PREFIXES", "encode_record", "parse_record", "sanitize_fields"]

FORMULA_PREFIXES = ("=", "+", "-")


def _field_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return value if isinstance(value, str) else str(value)


def sanitize_fields(fields: Iterable[Any]) -> list[str]:
    """Stringify fields and neutralize spreadsheet formulas.

    Args:
        fields: Field values. None and False become empty fields, True
            becomes "1", anything else is converted with ``str()``.

    Returns:
        Field strings, with a space prefixed to formula-like values.

    Example:
        >>> sanitize_fields(["=cmd", "normal", "+1", -2, None, True])
        [' =cmd', 'normal', ' +1', ' -2', '', '1']
    """
    sanitized: list[str] = []
    for value in fields:
        text = _field_text(value)
        if text[:1] in FORMULA_PREFIXES:
            text = " " + text
        sanitized.append(text)
    return sanitized


def encode_record(fields: list[str], delimiter: str = ",", enclosure: str = '"') -> str:
    """Encode one record terminated by a newline.

    Fields are quoted only when they contain the delimiter, the enclosure
    or a line break; embedded enclosures are doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quotechar=enclosure,
        doublequote=True,
        lineterminator="\n",
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writerow(fields)
    return buffer.getvalue()


def parse_record(
    lines: Iterator[str],
    delimiter: str = ",",
    enclosure: str = '"',
    escape: str | None = None,
) -> list[str] | None:
    """Parse one record from an iterator of physical lines.

    Only as many lines are consumed as the record needs; a quoted field may
    span several lines.

    Returns:
        The record's fields, or None when the iterator is exhausted.

    Raises:
        csv.Error: If the input is malformed.
    """
    reader = csv.reader(
        lines,
        delimiter=delimiter,
        quotechar=enclosure,
        escapechar=escape or None,
        doublequote=True,
        strict=True,
    )
    return next(reader, None)
