"""
Polling a stack until a create or update finishes.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from ..aws import StackController
from ..errors import (
    StackOperationFailedError,
    StackWaitCancelledError,
    StackWaitTimeoutError,
)

logger = logging.getLogger(__name__)

CREATE = "create"
UPDATE = "update"

# operation -> (success status, statuses that mean "keep waiting")
OPERATION_STATUSES: Dict[str, Tuple[str, FrozenSet[str]]] = {
    CREATE: ("CREATE_COMPLETE", frozenset({"CREATE_IN_PROGRESS"})),
    UPDATE: (
        "UPDATE_COMPLETE",
        frozenset({"UPDATE_IN_PROGRESS", "UPDATE_COMPLETE_CLEANUP_IN_PROGRESS"}),
    ),
}

DEFAULT_INTERVAL = 5.0


class StackStatusMonitor:
    """
    Wait for a stack operation to reach a terminal status.

    By default the monitor polls forever. ``max_attempts`` and ``max_duration``
    bound the wait, and setting ``cancel_event`` stops it between polls.
    """

    def __init__(
        self,
        controller: StackController,
        interval: float = DEFAULT_INTERVAL,
        max_attempts: Optional[int] = None,
        max_duration: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the monitor.

        Args:
            controller: Control plane for the stack's region
            interval: Seconds to wait before each describe call
            max_attempts: Give up after this many describe calls
            max_duration: Give up after this many seconds
            cancel_event: Set by the caller to abandon the wait
            clock: Monotonic time source used for max_duration
        """
        self.controller = controller
        self.interval = interval
        self.max_attempts = max_attempts
        self.max_duration = max_duration
        self.cancel_event = cancel_event or threading.Event()
        self.clock = clock

    def wait(self, stack_id: str, operation: str) -> Dict[str, Any]:
        """
        Block until the stack finishes ``operation``.

        Args:
            stack_id: Stack id returned by create/update
            operation: "create" or "update"

        Returns:
            The describe record of the stack once it completes

        Raises:
            ValueError: If operation is not create or update
            StackOperationFailedError: On any unexpected status
            StackNotFoundError: If the stack does not exist
            StackWaitTimeoutError: If max_attempts or max_duration is exceeded
            StackWaitCancelledError: If cancel_event is set
        """
        if operation not in OPERATION_STATUSES:
            raise ValueError("Must specify create or update")

        complete_status, in_progress = OPERATION_STATUSES[operation]
        started = self.clock()
        attempts = 0

        while True:
            if self.cancel_event.wait(self.interval):
                raise StackWaitCancelledError(
                    f"Stopped waiting for {operation} of {stack_id}"
                )

            stack = self.controller.describe_stack(stack_id)
            attempts += 1
            status = stack.get("StackStatus")
            logger.debug(f"CF stack status: {status}")

            if status == complete_status:
                return stack

            if not status or status not in in_progress:
                raise StackOperationFailedError(operation, status)

            if self.max_attempts is not None and attempts >= self.max_attempts:
                raise StackWaitTimeoutError(
                    f"Stack {stack_id} still {status} after {attempts} checks"
                )

            if (
                self.max_duration is not None
                and self.clock() - started >= self.max_duration
            ):
                raise StackWaitTimeoutError(
                    f"Stack {stack_id} still {status} after {self.max_duration}s"
                )
