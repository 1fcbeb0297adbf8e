"""Kernel labels – LabelKey codec.

A label vector is turned into a single string key by length-prefixing every
sanitised value::

    ("a", "200")      -> "1:a3:200"
    ("a:1", "")       -> "3:a:10:"
    ()                -> ""

Because each value carries its own length, no character inside a value can
be mistaken for a separator, so two distinct vectors never share a key.
"""
from __future__ import annotations

from typing import Iterable, NewType

from mp_metrics.kernel.errors import LabelKeyError

LabelKey = NewType("LabelKey", str)

EMPTY_LABEL_KEY = LabelKey("")


def sanitize_label_value(value: object) -> str:
    """Return ``str(value)`` without its non-printable characters."""
    text = value if isinstance(value, str) else str(value)
    if text.isprintable():
        return text
    return "".join(ch for ch in text if ch.isprintable())


def sanitize_label_values(values: Iterable[object]) -> tuple[str, ...]:
    return tuple(sanitize_label_value(v) for v in values)


def encode_label_key(values: Iterable[object]) -> LabelKey:
    """Encode *values* into a :data:`LabelKey`.

    Values are sanitised first, so identity is based on sanitised content.
    """
    parts = []
    for value in sanitize_label_values(values):
        parts.append(f"{len(value)}:{value}")
    return LabelKey("".join(parts))


def decode_label_key(key: str, arity: int) -> tuple[str, ...]:
    """Decode *key* back into the label vector it was built from.

    Raises:
        LabelKeyError: when *key* is malformed or does not hold exactly
            *arity* values.
    """
    values: list[str] = []
    pos = 0
    end = len(key)
    while pos < end:
        sep = key.find(":", pos)
        if sep == -1:
            raise LabelKeyError(f"Malformed label key {key!r}: missing length separator")
        length_text = key[pos:sep]
        if not (length_text.isascii() and length_text.isdigit()):
            raise LabelKeyError(f"Malformed label key {key!r}: bad length {length_text!r}")
        start = sep + 1
        stop = start + int(length_text)
        if stop > end:
            raise LabelKeyError(f"Malformed label key {key!r}: value overruns key")
        values.append(key[start:stop])
        pos = stop
    if len(values) != arity:
        raise LabelKeyError(
            f"Label key {key!r} holds {len(values)} value(s), expected {arity}",
            detail={"expected": arity, "received": len(values)},
        )
    return tuple(values)


__all__ = [
    "EMPTY_LABEL_KEY",
    "LabelKey",
    "decode_label_key",
    "encode_label_key",
    "sanitize_label_value",
    "sanitize_label_values",
]
