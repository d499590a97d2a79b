import time
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional


WINDOW_SECONDS = 60.0


@dataclass
class BudgetWindow:
    window_start: float
    consumed: int
    ceiling: int


class BudgetTracker:
    """Token budget over a rolling one-minute window.

    Costs are charged against the estimate before the request is sent.
    Provider-reported usage is never fed back into the window.
    """

    def __init__(
        self,
        ceiling: int,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None
    ):
        if ceiling <= 0:
            raise ValueError(f"ceiling must be positive, got {ceiling}")

        self.clock = clock
        self.sleep = sleep
        self.logger = logger or logging.getLogger(__name__)
        self.window = BudgetWindow(window_start=clock(), consumed=0, ceiling=ceiling)

        self.total_admitted = 0
        self.total_waited = 0.0
        self.wait_count = 0

    @property
    def ceiling(self) -> int:
        return self.window.ceiling

    @property
    def consumed(self) -> int:
        return self.window.consumed

    def admit(self, estimated_cost: int) -> None:
        now = self.clock()
        if now - self.window.window_start >= WINDOW_SECONDS:
            self._reset(now)

        if self.window.consumed + estimated_cost > self.window.ceiling:
            if self.window.consumed == 0:
                # Oversized request: a fresh window can never hold it
                self.logger.warning(
                    f"Estimated cost {estimated_cost} exceeds budget ceiling "
                    f"{self.window.ceiling}; admitting into an empty window"
                )
            else:
                wait = WINDOW_SECONDS - (now - self.window.window_start)
                self.logger.warning(
                    f"Token budget would be exceeded "
                    f"({self.window.consumed}+{estimated_cost}>{self.window.ceiling}), "
                    f"waiting {wait:.1f}s for a new window"
                )
                if wait > 0:
                    self.sleep(wait)
                    self.total_waited += wait
                self.wait_count += 1
                self._reset(self.clock())

        self.window.consumed += estimated_cost
        self.total_admitted += estimated_cost

    def _reset(self, now: float):
        self.window.window_start = now
        self.window.consumed = 0

    def status(self) -> Dict:
        return {
            'consumed': self.window.consumed,
            'ceiling': self.window.ceiling,
            'remaining': max(0, self.window.ceiling - self.window.consumed),
            'window_start': self.window.window_start,
            'total_admitted': self.total_admitted,
            'total_waited_sec': self.total_waited,
            'wait_count': self.wait_count,
        }
