"""Push – Pushgateway URL construction from a job and grouping labels."""
from __future__ import annotations

import base64
import re
from typing import Mapping
from urllib.parse import quote_plus

from mp_metrics.kernel.errors import InvalidNameError

_LABEL_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def escape_grouping_pair(name: str, value: str) -> tuple[str, str]:
    """Return the two path segments for one grouping label.

    Empty values and values containing ``/`` cannot travel as plain path
    segments, so they switch to the ``<name>@base64`` form.
    """
    if value == "":
        return f"{name}@base64", "="
    if "/" in value:
        encoded = base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii")
        return f"{name}@base64", encoded
    return name, quote_plus(value)


def build_push_url(gateway_url: str, job: str, grouping: Mapping[str, str] | None = None) -> str:
    """Build ``<gateway>/metrics/job/<job>/<label>/<value>...``.

    Grouping labels are emitted in sorted order so the same grouping always
    addresses the same group.
    """
    if not job:
        raise InvalidNameError(job, "job must not be empty")
    base = gateway_url.rstrip("/")
    if "://" not in base:
        base = f"http://{base}"

    segments = ["metrics", *escape_grouping_pair("job", job)]
    for name, value in sorted((grouping or {}).items()):
        if not _LABEL_RE.match(name):
            raise InvalidNameError(name, "grouping label names must match [a-zA-Z_][a-zA-Z0-9_]*")
        segments.extend(escape_grouping_pair(name, str(value)))
    return base + "/" + "/".join(segments)


__all__ = ["build_push_url", "escape_grouping_pair"]
