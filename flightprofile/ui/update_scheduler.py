"""Update scheduler for background profile computations.

Uses python-statemachine for the scheduling lifecycle:

States:
    IDLE: Nothing pending, nothing running
    SCHEDULED: Debounce timer armed, repeated triggers restart it
    RUNNING: One background computation in flight
    COMPLETED: Last computation finished, its result was delivered
    CANCELLED: Last computation observed cancellation, its result was dropped

Transitions:
    IDLE/SCHEDULED/RUNNING -> SCHEDULED: schedule_update (route, terrain or visibility trigger)
    SCHEDULED -> IDLE: suppress_update (timer fired while hidden)
    IDLE/SCHEDULED/RUNNING -> RUNNING: start_update (timer fired or run_now)
    RUNNING -> COMPLETED: complete_update
    RUNNING -> CANCELLED: cancel_update
    COMPLETED/CANCELLED -> IDLE: settle_update

Single-flight
-------------
Starting a computation first cancels the token of the one in flight and
joins its thread, so at most one worker exists at any time. Every run gets
a fresh CancellationToken; a worker whose token was cancelled never
delivers its result. The state machine only follows the most recently
started run: a superseded run finishing late does not move it.

Threading
---------
Timer callbacks and workers run on their own threads. All state machine
access is serialized by an RLock. Starting a run is serialized by a second
lock that is never held by finishing workers, so joining a worker cannot
deadlock. A start requested from the worker's own thread (for example from
the result callback) is deferred to a zero-delay timer.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from flightprofile.constants import ProfileConfig
from flightprofile.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


@dataclass
class UpdateContext:
    """Model of the update state machine.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model.
    """

    state: str | None = None
    generation: int = 0
    started_count: int = 0
    completed_count: int = 0
    cancelled_count: int = 0


class LoggingListener:
    """Logs every transition of the update state machine."""

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[PROFILE] {source.name} --({event})--> {target.name}")


class UpdateStateMachine(StateMachine):
    """Lifecycle of debounced, single-flight profile updates."""

    idle = State("Idle", initial=True)
    scheduled = State("Scheduled")
    running = State("Running")
    completed = State("Completed")
    cancelled = State("Cancelled")

    schedule_update = idle.to(scheduled) | scheduled.to(scheduled) | running.to(scheduled)
    suppress_update = scheduled.to(idle)
    start_update = idle.to(running) | scheduled.to(running) | running.to(running)
    complete_update = running.to(completed)
    cancel_update = running.to(cancelled)
    settle_update = completed.to(idle) | cancelled.to(idle)

    def __init__(self, context: UpdateContext | None = None) -> None:
        super().__init__(model=context or UpdateContext())

    @property
    def context(self) -> UpdateContext:
        return self.model

    @property
    def is_idle(self) -> bool:
        return self.idle.is_active

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled.is_active

    @property
    def is_running(self) -> bool:
        return self.running.is_active

    def on_enter_running(self) -> None:
        self.context.generation += 1
        self.context.started_count += 1

    def on_enter_completed(self) -> None:
        self.context.completed_count += 1

    def on_enter_cancelled(self) -> None:
        self.context.cancelled_count += 1

    def get_state_name(self) -> str:
        return self.current_state.name

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure."""
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"Transition '{event}' not allowed from {self.get_state_name()}")
            return False


class UpdateScheduler(Generic[ResultT]):
    """Debounces update triggers and runs one computation at a time.

    Example:
        scheduler = UpdateScheduler(compute=build_profile, on_result=apply_profile)
        scheduler.set_visible(True)   # immediate first run
        scheduler.schedule()          # debounced rerun after route edits
        scheduler.shutdown()          # cancel and join before teardown
    """

    def __init__(
        self,
        compute: Callable[[CancellationToken], Optional[ResultT]],
        on_result: Callable[[ResultT], None],
        debounce_s: float = ProfileConfig.UPDATE_TIMEOUT_S,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        """Initialize the scheduler, hidden and idle.

        Args:
            compute: Work function run on the worker thread. Returns None
                when it observed cancellation.
            on_result: Receives the result of a run that was not cancelled.
                Called on the worker thread without the scheduler lock held, so it
                may call schedule() or run_now(). It must not block on a thread
                that is itself waiting in run_now() or shutdown().
            debounce_s: Delay between the last trigger and the run
            on_error: Receives exceptions raised by compute, on the worker thread
        """
        self._compute = compute
        self._on_result = on_result
        self._on_error = on_error
        self.debounce_s = debounce_s

        self.machine = UpdateStateMachine()
        self.machine.add_listener(LoggingListener())

        self._lock = threading.RLock()
        self._start_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._timer_seq = 0
        self._worker: Optional[threading.Thread] = None
        self._token: Optional[CancellationToken] = None
        self._visible = False
        self._shut_down = False
        self.last_error: Optional[BaseException] = None

    @property
    def context(self) -> UpdateContext:
        return self.machine.context

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def is_running(self) -> bool:
        worker = self._worker
        return worker is not None and worker.is_alive()

    def set_visible(self, visible: bool) -> None:
        """Track widget visibility; becoming visible triggers an immediate run."""
        with self._lock:
            self._visible = visible
        if visible:
            self.schedule(delay_s=0.0)

    def schedule(self, delay_s: Optional[float] = None) -> None:
        """Arm or restart the debounce timer.

        Ignored while hidden or after shutdown.

        Args:
            delay_s: Override of the debounce delay
        """
        delay = self.debounce_s if delay_s is None else delay_s
        with self._lock:
            if not self._visible or self._shut_down:
                logger.debug("Profile update trigger ignored (hidden or shut down)")
                return
            if self._timer is not None:
                self._timer.cancel()
            self.machine.try_transition("schedule_update")
            # A timer that already fired but waits for the lock sees a newer sequence and backs off
            self._timer_seq += 1
            self._timer = threading.Timer(delay, self._on_timeout, args=(self._timer_seq,))
            self._timer.daemon = True
            self._timer.start()
        logger.debug(f"Profile update scheduled in {delay:.2f}s")

    def _on_timeout(self, seq: int) -> None:
        with self._lock:
            if seq != self._timer_seq or self._shut_down:
                return
            if not self._visible:
                self._timer = None
                if self.machine.is_scheduled:
                    self.machine.try_transition("suppress_update")
                return
        logger.debug("Profile update timer fired")
        self.run_now()
        # Cleared only after the worker exists, so wait_idle never sees a gap
        with self._lock:
            if seq == self._timer_seq:
                self._timer = None

    def run_now(self) -> None:
        """Start a computation immediately, cancelling the one in flight.

        Ignored while hidden or after shutdown.
        Called from the worker thread itself, the start is deferred to a
        zero-delay timer instead of joining the caller.
        """
        if self._worker is not None and self._worker is threading.current_thread():
            self.schedule(delay_s=0.0)
            return

        with self._start_lock:
            with self._lock:
                if not self._may_start():
                    return
                old_worker, old_token = self._worker, self._token

            if old_worker is not None and old_worker.is_alive():
                old_token.cancel()
                old_worker.join()

            with self._lock:
                if not self._may_start():
                    return
                token = CancellationToken()
                self.machine.try_transition("start_update")
                generation = self.context.generation
                worker = threading.Thread(
                    target=self._run,
                    args=(token, generation),
                    name=f"profile-update-{generation}",
                    daemon=True,
                )
                self._worker, self._token = worker, token
                worker.start()

    def _may_start(self) -> bool:
        # Caller holds self._lock
        if self._shut_down:
            return False
        if not self._visible:
            if self.machine.is_scheduled:
                self.machine.try_transition("suppress_update")
            logger.debug("Profile update start ignored while hidden")
            return False
        return True

    def _run(self, token: CancellationToken, generation: int) -> None:
        result: Optional[ResultT] = None
        error: Optional[Exception] = None
        try:
            result = self._compute(token)
        except Exception as exc:
            logger.exception(f"Profile update {generation} failed")
            self.last_error = exc
            error = exc
            result = None

        with self._lock:
            delivered = result is not None and not token.is_cancelled and self._visible

        # Callbacks run without the lock so they may trigger further updates
        if error is not None and self._on_error is not None:
            self._on_error(error)
        if delivered:
            self._on_result(result)

        with self._lock:
            is_current = generation == self.context.generation and self.machine.is_running
            if is_current:
                self.machine.try_transition("complete_update" if delivered else "cancel_update")
                self.machine.try_transition("settle_update")
            elif not delivered:
                logger.debug(f"Superseded profile update {generation} discarded")

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no timer is pending and no worker is running.

        Returns:
            True if the scheduler went idle within the timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                timer, worker = self._timer, self._worker
            if timer is None and (worker is None or not worker.is_alive()):
                return True

            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return False
            # The timer thread only spawns the worker, so wait for it first
            (timer if timer is not None else worker).join(remaining)

    def shutdown(self) -> None:
        """Cancel pending and running work and wait for the worker to stop."""
        with self._lock:
            self._shut_down = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            worker, token = self._worker, self._token
        if worker is not None and worker.is_alive():
            token.cancel()
            if worker is not threading.current_thread():
                worker.join()
        logger.info("Profile update scheduler shut down")
