"""
Progress reporting and cooperative cancellation.

Long-running passes report ticks through a ProgressListener. Reporting a
tick is also where cancellation is noticed: once cancel() has been
called, the next set_progress()/increment_progress() raises
CanceledError, which the algorithms let propagate.
"""

from typing import Optional

from tqdm import tqdm


class CanceledError(Exception):
    """Raised when a computation is canceled through its progress listener."""


class ProgressListener:
    """Silent listener; the base for all others."""

    def __init__(self):
        self.maximum = 0
        self.progress = 0
        self.subtask: Optional[str] = None
        self._canceled = False

    def cancel(self):
        self._canceled = True

    def is_canceled(self) -> bool:
        return self._canceled

    def check_for_cancel(self):
        if self._canceled:
            raise CanceledError(f"canceled during {self.subtask or 'computation'}")

    def set_subtask(self, name: str):
        self.subtask = name

    def set_maximum(self, maximum: int):
        self.maximum = maximum

    def set_progress(self, progress: int):
        self.progress = progress
        self.check_for_cancel()

    def increment_progress(self):
        self.set_progress(self.progress + 1)

    def close(self):
        pass


class TqdmProgress(ProgressListener):
    """Listener that draws a tqdm bar, one bar segment per subtask."""

    def __init__(self, desc: str = "RazorNet", disable: bool = False):
        super().__init__()
        self._bar = tqdm(total=0, desc=desc, unit="step", disable=disable, leave=False)

    def set_subtask(self, name: str):
        super().set_subtask(name)
        self._bar.set_postfix_str(name)

    def set_maximum(self, maximum: int):
        super().set_maximum(maximum)
        self._bar.reset(total=maximum)

    def set_progress(self, progress: int):
        self._bar.n = progress
        self._bar.refresh()
        super().set_progress(progress)

    def close(self):
        self._bar.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
