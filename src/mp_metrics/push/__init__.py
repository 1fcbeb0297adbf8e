"""Push – delivering rendered payloads to a Pushgateway."""
from mp_metrics.push.grouping import build_push_url, escape_grouping_pair
from mp_metrics.push.transport import HttpxPushTransport, PushTransport
from mp_metrics.push.cycle import InitCallback, PushCycle, PushResult, UpdateCallback
from mp_metrics.push.loop import PushLoop

__all__ = [
    "HttpxPushTransport",
    "InitCallback",
    "PushCycle",
    "PushLoop",
    "PushResult",
    "PushTransport",
    "UpdateCallback",
    "build_push_url",
    "escape_grouping_pair",
]
