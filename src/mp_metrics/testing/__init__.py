"""Testing – fakes for code that embeds the registry."""
from mp_metrics.testing.fakes import InMemoryPushTransport

__all__ = ["InMemoryPushTransport"]
