from .types import OrderMode, ReplayRange, ReplayResult, Window, WindowReport, WindowState, effective_time
from .range_resolver import RangeResolver
from .window_planner import plan as plan_windows
from .fetcher import EventFetcher
from .merger import merge
from .dispatcher import Dispatcher
from .worker import SerialWindowWorker
from .scheduler import ReplayHandle, Scheduler
from .time_provider import EventTimeManager
from .replay import Replay

__all__ = [
    "OrderMode", "ReplayRange", "ReplayResult", "Window", "WindowReport", "WindowState", "effective_time",
    "RangeResolver", "plan_windows", "EventFetcher", "merge", "Dispatcher",
    "SerialWindowWorker", "ReplayHandle", "Scheduler", "EventTimeManager", "Replay",
]
