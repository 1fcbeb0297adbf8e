"""Kernel labels – label sanitisation and the injective LabelKey codec."""
from mp_metrics.kernel.labels.codec import (
    EMPTY_LABEL_KEY,
    LabelKey,
    decode_label_key,
    encode_label_key,
    sanitize_label_value,
    sanitize_label_values,
)

__all__ = [
    "EMPTY_LABEL_KEY",
    "LabelKey",
    "decode_label_key",
    "encode_label_key",
    "sanitize_label_value",
    "sanitize_label_values",
]
