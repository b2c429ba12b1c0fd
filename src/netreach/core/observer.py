"""Periodic reachability polling with change-only delivery.

An `InternetObservation` owns one daemon worker thread. The worker calls the
strategy's `is_connected` on a fixed-rate schedule, one check at a time, and
forwards a value only when it differs from the previously forwarded one.

Values can be consumed either by iterating the observation or by passing a
callback to `start()`, which is invoked on the worker thread. Iteration blocks
and ends after `cancel()`; closing or dropping the iterator also cancels.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from netreach.core.settings import ProbeConfig

if TYPE_CHECKING:
    from netreach.core.strategy import InternetObservingStrategy

logger = logging.getLogger(__name__)

_DONE = object()
_UNSET = object()


def distinct_until_changed(values: Iterable[bool]) -> Iterator[bool]:
    """Yield the first value, then only values that differ from the last one yielded."""
    last: object = _UNSET
    for value in values:
        if value != last:
            last = value
            yield value


def fixed_rate_delays(
    initial_s: float,
    interval_s: float,
    clock: Callable[[], float] = time.monotonic,
) -> Iterator[float]:
    """Yield the wait before each tick so tick n is due at start + initial + n * interval.

    Each value is computed when the previous tick has finished. Ticks missed
    while a check overran collapse into a single immediate tick.
    """
    next_due = clock() + initial_s
    while True:
        yield max(0.0, next_due - clock())
        next_due += interval_s
        now = clock()
        if next_due < now:
            next_due += ((now - next_due) // interval_s) * interval_s


class InternetObservation:
    def __init__(
        self,
        config: ProbeConfig,
        strategy: InternetObservingStrategy,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._strategy = strategy
        self._clock = clock

        self._lock = threading.RLock()
        self._cancelled = threading.Event()
        self._queue: queue.Queue[object] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._on_change: Callable[[bool], None] | None = None
        self._error: BaseException | None = None
        self._last_value: bool | None = None

    @property
    def config(self) -> ProbeConfig:
        return self._config

    @property
    def strategy(self) -> InternetObservingStrategy:
        return self._strategy

    @property
    def last_value(self) -> bool | None:
        """Most recently delivered value, or None before the first one."""
        return self._last_value

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def is_active(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self.cancelled

    def start(self, on_change: Callable[[bool], None] | None = None) -> InternetObservation:
        """Start polling; `on_change` receives each transition on the worker thread."""
        self._start(on_change or self._queue.put)
        return self

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            self._queue.put(_DONE)
        logger.debug("Cancelled observation of %s:%s", self._config.host, self._config.port)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker to exit; returns True when it has."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def __iter__(self) -> Iterator[bool]:
        self._start(self._queue.put)
        return self._drain()

    def __enter__(self) -> InternetObservation:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else ("active" if self._thread else "idle")
        return (
            f"InternetObservation(strategy={self._strategy!r}, host={self._config.host!r}, "
            f"port={self._config.port}, state={state})"
        )

    def _start(self, on_change: Callable[[bool], None]) -> None:
        with self._lock:
            if self._cancelled.is_set():
                raise RuntimeError("Observation was cancelled")
            if self._thread is not None:
                raise RuntimeError("Observation already started")
            self._on_change = on_change
            self._thread = threading.Thread(
                target=self._run,
                name=f"netreach-{type(self._strategy).__name__}",
                daemon=True,
            )
            self._thread.start()
        logger.debug(
            "Observing %s:%s every %sms with %r",
            self._config.host,
            self._config.port,
            self._config.interval_ms,
            self._strategy,
        )

    def _drain(self) -> Iterator[bool]:
        # Leaving the loop, closing the iterator or dropping it unsubscribes.
        try:
            while True:
                item = self._queue.get()
                if item is _DONE:
                    if self._error is not None:
                        raise self._error
                    return
                yield item  # type: ignore[misc]
        finally:
            self.cancel()

    def _run(self) -> None:
        try:
            for value in distinct_until_changed(self._ticks()):
                self._emit(value)
        except Exception as exc:
            logger.exception("Reachability check failed unexpectedly; observation stopped")
            self._error = exc
        finally:
            self._queue.put(_DONE)

    def _ticks(self) -> Iterator[bool]:
        config = self._config
        delays = fixed_rate_delays(
            config.initial_interval_ms / 1000.0,
            config.interval_ms / 1000.0,
            self._clock,
        )
        for delay in delays:
            if self._cancelled.wait(delay):
                return
            connected = self._strategy.is_connected(
                config.host, config.port, config.timeout_ms, config.error_handler
            )
            if self._cancelled.is_set():
                return
            yield bool(connected)

    def _emit(self, value: bool) -> None:
        with self._lock:
            if self._cancelled.is_set():
                return
            self._last_value = value
            logger.info(
                "Internet %s (%s:%s)",
                "online" if value else "offline",
                self._config.host,
                self._config.port,
            )
            try:
                self._on_change(value)  # type: ignore[misc]
            except Exception:
                logger.exception("Reachability callback raised")
