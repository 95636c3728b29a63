from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..core.constants import SWEEP_INTERVAL_MINUTES
from .service import ReconciliationSweep, SweepReport

logger = get_logger("sweep.scheduler")


class SweepScheduler:
    """Runs the sweep on a fixed interval from a daemon thread.

    A failing tick is logged and the schedule carries on.
    """

    def __init__(
        self,
        sweep: ReconciliationSweep,
        *,
        interval_minutes: float = SWEEP_INTERVAL_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self._sweep = sweep
        self._interval = float(interval_minutes) * 60.0
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self, now: datetime | None = None) -> Optional[SweepReport]:
        try:
            return self._sweep.run(now or self._clock())
        except Exception:
            logger.exception("sweep tick failed")
            return None

    def _loop(self) -> None:
        while not self._stop.wait(self._interval):
            self.tick()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="attendance-sweep", daemon=True)
        self._thread.start()
        logger.info("sweep scheduled every %.0f minutes", self._interval / 60.0)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
