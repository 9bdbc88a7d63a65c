"""Background thread that periodically removes expired sessions."""

import threading
from typing import Optional

from cms.auth.sessions import SessionManager
from cms.utils.logger import get_logger

logger = get_logger(__name__)


class SessionSweeper:
    """Runs SessionManager.sweep_expired() every interval seconds"""

    def __init__(self, sessions: SessionManager, interval_seconds: int):
        self.sessions = sessions
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _loop(self) -> None:
        logger.info("Session sweeper loop started", interval_seconds=self.interval_seconds)
        while not self._stop.wait(self.interval_seconds):
            try:
                self.sessions.sweep_expired()
            except Exception as e:
                logger.error("Error in session sweeper loop", error=str(e))
        logger.info("Session sweeper loop stopped")

    def start(self) -> None:
        if self.interval_seconds <= 0:
            logger.info("Session sweeper disabled")
            return
        if self._thread is not None:
            logger.warning("Session sweeper already running")
            return

        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True, name="session-sweeper")
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
