from .base import Runtime, TimeProvider
from .context import Context
from .event_runtime import EventRuntime

__all__ = ["Runtime", "TimeProvider", "Context", "EventRuntime"]
