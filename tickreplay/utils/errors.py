# tickreplay/utils/errors.py
from __future__ import annotations


class ReplayError(RuntimeError):
    """Base class of every error raised by tickreplay."""


class UserInputError(ReplayError):
    """
    Raised for invalid user-provided config (bounds, durations, modes).
    Should NOT print traceback.
    """


class RangeUnavailable(ReplayError):
    """
    No bound could be inferred because every tracked store is empty.
    Callers normally turn this into an empty run.
    """


class _WindowError(ReplayError):
    def __init__(self, window, message: str):
        self.window = window
        super().__init__(f"{message} (window={window})")


class FetchFailure(_WindowError):
    """Store query failed mid-window. Terminates the run, no retry."""


class DispatchFailure(_WindowError):
    """publish / advance_time raised. Terminates the run."""


class StoreError(ReplayError):
    pass


class StoreClosedError(StoreError):
    """Operation attempted on a store handle that is not open."""


class ClockRegression(ReplayError):
    """Runtime asked to move its clock backward."""
