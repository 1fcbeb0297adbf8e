"""Testing fakes – in-memory doubles for the push collaborators."""
from mp_metrics.testing.fakes.transport import InMemoryPushTransport

__all__ = ["InMemoryPushTransport"]
