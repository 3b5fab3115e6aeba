"""
Bounded polling of long-running operations on external engines.

Any engine that hands out an operation ID on submission and reports a state for that ID can be awaited with an
``OperationPoller``. The poller blocks the calling thread between status checks; there is no cancellation other than
the maximum wait time, and no state is kept beyond a single ``wait`` call.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from pydantic import Field
from pydantic.dataclasses import dataclass as pydantic_dataclass

from databootstrap.services.custom_resources.exceptions import (
    ExternalOperationFailed,
    PollTimeout,
)

LOG = logging.getLogger(__name__)


class OperationState(str, Enum):
    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


PENDING_STATES = (OperationState.QUEUED, OperationState.RUNNING)


def is_pending(state: Optional[str]) -> bool:
    """Whether the operation may still transition. Unknown states count as terminal."""
    return state in PENDING_STATES


class PollStatus(Enum):
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    TIMED_OUT = "TimedOut"


@pydantic_dataclass
class PollSpec:
    operation_id: str
    max_wait_seconds: float = Field(60.0, title="Maximum total wait in seconds", ge=0, allow_inf_nan=False)
    poll_interval_seconds: float = Field(1.0, title="Sleep between two status checks", gt=0, allow_inf_nan=False)


@dataclass
class PollOutcome:
    status: PollStatus
    operation_id: str
    # last state reported by the engine
    state: Optional[str]
    elapsed: float
    checks: int

    @property
    def succeeded(self) -> bool:
        return self.status == PollStatus.SUCCEEDED

    def raise_for_status(self) -> "PollOutcome":
        """Return this outcome if it succeeded, otherwise raise the matching error."""
        if self.succeeded:
            return self
        if self.status == PollStatus.TIMED_OUT:
            raise PollTimeout(self.elapsed, operation_id=self.operation_id)
        raise ExternalOperationFailed(self.state, operation_id=self.operation_id)


StatusFunction = Callable[[str], Optional[str]]


class OperationPoller:
    """
    Waits for an operation to reach a terminal state by periodically calling ``get_status``.

    ``clock`` and ``sleep`` default to ``time.monotonic`` and ``time.sleep`` and can be replaced to simulate time.
    The elapsed time is the larger of the time measured by ``clock`` and the sum of all intervals slept, so a
    ``sleep`` that does not advance ``clock`` still terminates after ``max_wait_seconds``.
    """

    def __init__(
        self,
        get_status: StatusFunction,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._get_status = get_status
        self._clock = clock
        self._sleep = sleep

    def wait(self, spec: PollSpec) -> PollOutcome:
        operation_id = spec.operation_id
        start = self._clock()
        slept = 0.0
        elapsed = 0.0
        checks = 0

        while True:
            self._sleep(spec.poll_interval_seconds)
            slept += spec.poll_interval_seconds

            state = self._get_status(operation_id)
            checks += 1
            elapsed = max(elapsed, slept, self._clock() - start)

            if not is_pending(state):
                break
            if elapsed >= spec.max_wait_seconds:
                LOG.warning(
                    "Execution %s still %s after ~%gs, giving up (max wait %gs)",
                    operation_id,
                    state,
                    elapsed,
                    spec.max_wait_seconds,
                )
                return PollOutcome(PollStatus.TIMED_OUT, operation_id, state, elapsed, checks)
            LOG.info("Execution %s still running after ~%gs...", operation_id, elapsed)

        if state == OperationState.SUCCEEDED:
            LOG.info("Execution %s succeeded after ~%gs", operation_id, elapsed)
            return PollOutcome(PollStatus.SUCCEEDED, operation_id, state, elapsed, checks)

        LOG.warning("Execution %s entered non-success state '%s'", operation_id, state)
        return PollOutcome(PollStatus.FAILED, operation_id, state, elapsed, checks)


def await_operation(
    get_status: StatusFunction,
    operation_id: str,
    max_wait_seconds: float,
    poll_interval_seconds: float,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> PollOutcome:
    spec = PollSpec(
        operation_id=operation_id,
        max_wait_seconds=max_wait_seconds,
        poll_interval_seconds=poll_interval_seconds,
    )
    return OperationPoller(get_status, clock=clock, sleep=sleep).wait(spec)
