"""Jobs that run over the world at fixed intervals."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from aworld.batches import charge_down, delete_character
from aworld.context import Context

Job = Callable[[Context], "list[int]"]


@dataclass
class Schedule:
    """A job run at most once per ``msec`` milliseconds."""

    func: Job
    msec: int
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _timer: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._timer = self.clock()

    def exec(self, context: Context) -> list[int] | None:
        """Run the job if its interval has passed; return its mutations or None."""
        now = self.clock()
        elapsed = int((now - self._timer) * 1000)
        if elapsed > self.msec:
            self._timer = now
            return self.func(context)
        return None


def make_schedules() -> list[Schedule]:
    return [
        Schedule(charge_down, 10),
        Schedule(delete_character, 50),
    ]