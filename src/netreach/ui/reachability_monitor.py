"""Qt adapter that turns an observation into a `reachabilityChanged` signal."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from netreach.core.connectivity import observe_with_settings
from netreach.core.error_handler import ErrorHandler
from netreach.core.observer import InternetObservation
from netreach.core.settings import ObservingSettings, get_settings
from netreach.core.strategy import InternetObservingStrategy

logger = logging.getLogger(__name__)


class ReachabilityMonitor(QObject):
    # Emitted from the worker thread; Qt queues it to receivers in other threads.
    reachabilityChanged = pyqtSignal(bool)

    def __init__(
        self,
        settings: ObservingSettings | None = None,
        *,
        strategy: InternetObservingStrategy | None = None,
        error_handler: ErrorHandler | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or get_settings()
        self._strategy = strategy
        self._error_handler = error_handler
        self._observation: InternetObservation | None = None

    @property
    def last_value(self) -> bool | None:
        if self._observation is None:
            return None
        return self._observation.last_value

    def is_running(self) -> bool:
        return self._observation is not None and self._observation.is_active()

    def start(self) -> None:
        if self.is_running():
            return
        self._observation = observe_with_settings(
            self._settings,
            strategy=self._strategy,
            error_handler=self._error_handler,
        )
        self._observation.start(self.reachabilityChanged.emit)
        logger.info("Started reachability monitor: %r", self._observation)

    def stop(self, *, timeout_s: float | None = None) -> None:
        observation = self._observation
        if observation is None:
            return
        observation.cancel()
        if timeout_s is not None and not observation.join(timeout_s):
            logger.warning("Reachability worker still busy after %.1fs", timeout_s)
        logger.info("Stopped reachability monitor")
