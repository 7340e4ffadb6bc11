"""
Lecture player - owns the viewing session of the lecture on screen.

One session per opened lecture. Opening another lecture, or closing the
player, cancels the ticker and detaches the visibility monitor before
anything else happens. Completion is handed to the sync client on a
single worker thread so the state machine never waits on the network.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for_futures
from threading import Lock

from coursetrack.adapters.clock import SystemClock
from coursetrack.adapters.ticker import ThreadTicker
from coursetrack.app_shell.config import duration_policy, engagement_config
from coursetrack.components.engagement import (
    ClockPort,
    CompletionEvent,
    DurationPolicyPort,
    EngagementConfig,
    EngagementStateMachine,
    OpenSessionInput,
    OpenSessionOutput,
    TickerPort,
    run_close_session,
    run_open_session,
)
from coursetrack.components.sync import (
    CompletionReporterPort,
    PrincipalLostHandler,
    PrincipalNotFoundError,
    SyncResult,
)
from coursetrack.components.visibility import EngagementSignal, VisibilityMonitor
from coursetrack.domain.entities import normalize_lecture_id
from coursetrack.rules.models import Rules

logger = logging.getLogger(__name__)


class LecturePlayer:
    def __init__(
        self,
        sync: CompletionReporterPort,
        *,
        clock: ClockPort,
        ticker: TickerPort,
        duration_policy: DurationPolicyPort | None = None,
        config: EngagementConfig | None = None,
        executor: Executor | None = None,
        on_principal_lost: PrincipalLostHandler | None = None,
    ):
        self.sync = sync
        self.clock = clock
        self.ticker = ticker
        self.duration_policy = duration_policy
        self.config = config
        self.on_principal_lost = on_principal_lost
        self.monitor = VisibilityMonitor()

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="coursetrack-sync"
        )
        self._lock = Lock()
        self._machine: EngagementStateMachine | None = None
        self._pending: list[Future[SyncResult]] = []

    @property
    def machine(self) -> EngagementStateMachine | None:
        return self._machine

    @property
    def lecture_id(self) -> str | None:
        return self._machine.session.lecture_id if self._machine else None

    def open(self, lecture_id: object) -> OpenSessionOutput:
        """
        Start watching a lecture.

        The learner clicked to open it, so tracking resumes immediately
        unless the lecture is already completed.
        """
        lid = normalize_lecture_id(lecture_id)
        self.close()

        record = self.sync.record
        output = run_open_session(
            OpenSessionInput(lecture_id=lid, already_completed=bool(record and record.is_completed(lid))),
            clock=self.clock,
            ticker=self.ticker,
            duration_policy=self.duration_policy,
            config=self.config,
            on_complete=self._on_complete,
        )
        with self._lock:
            self._machine = output.machine

        if output.tracking:
            self.monitor.attach(output.machine)
            self.monitor.handle("load")
        logger.info(
            "Opened lecture %s (tracking=%s, threshold=%.0fs)",
            lid,
            output.tracking,
            output.threshold_seconds,
        )
        return output

    def close(self) -> float | None:
        """
        Tear down the current session, if any.

        Returns:
            Seconds of active watching credited, or None if nothing was open
        """
        with self._lock:
            machine, self._machine = self._machine, None
        if machine is None:
            return None

        self.monitor.detach()
        accumulated = run_close_session(machine)
        logger.debug(
            "Closed lecture %s after %.1fs (%.0f%% of threshold)",
            machine.session.lecture_id,
            accumulated,
            machine.session.progress_ratio * 100,
        )
        return accumulated

    def signal(self, name: str, *, on_player_surface: bool = True) -> EngagementSignal | None:
        return self.monitor.handle(name, on_player_surface=on_player_surface)

    @property
    def pending_reports(self) -> int:
        with self._lock:
            return len(self._pending)

    def wait_for_sync(self, timeout: float | None = None) -> bool:
        """
        Block until in-flight completion reports finish.

        Returns:
            True if nothing is left in flight
        """
        with self._lock:
            pending = list(self._pending)
        _, not_done = wait_for_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        self.close()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> LecturePlayer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # --- Completion ---

    def _on_complete(self, event: CompletionEvent) -> None:
        try:
            future = self._executor.submit(self.sync.report_completion, event.lecture_id)
        except RuntimeError:
            # Executor shut down while this completion was in flight
            logger.info("Reporting completion of %s inline", event.lecture_id)
            future = self._report_inline(event.lecture_id)

        with self._lock:
            self._pending.append(future)
        future.add_done_callback(self._report_done)

    def _report_inline(self, lecture_id: str) -> Future[SyncResult]:
        future: Future[SyncResult] = Future()
        try:
            future.set_result(self.sync.report_completion(lecture_id))
        except Exception as e:
            future.set_exception(e)
        return future

    def _report_done(self, future: Future[SyncResult]) -> None:
        with self._lock:
            if future in self._pending:
                self._pending.remove(future)

        error = future.exception()
        if isinstance(error, PrincipalNotFoundError):
            logger.error("Principal lost while reporting completion: %s", error)
            if self.on_principal_lost is not None:
                self.on_principal_lost(error)
        elif error is not None:
            logger.error("Completion report crashed", exc_info=error)


def create_lecture_player(
    rules: Rules,
    sync: CompletionReporterPort,
    *,
    clock: ClockPort | None = None,
    ticker: TickerPort | None = None,
) -> LecturePlayer:
    """Player tuned by the engagement section of the rules file."""
    return LecturePlayer(
        sync,
        clock=clock or SystemClock(),
        ticker=ticker or ThreadTicker(),
        duration_policy=duration_policy(rules),
        config=engagement_config(rules),
    )
