import logging
import os
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional
from settlewise.db.database import SessionLocal
from settlewise.services.scenario_service import delete_expired_scenarios

logger = logging.getLogger(__name__)

SCENARIO_TTL_MINUTES = int(os.getenv("SCENARIO_TTL_MINUTES", "60"))
CLEANUP_INTERVAL_SECONDS = int(os.getenv("SCENARIO_CLEANUP_INTERVAL_SECONDS", "300"))


class ScenarioCleanupManager:
    """Periodically deletes scenarios older than the configured TTL"""

    def __init__(self, session_factory=SessionLocal, ttl_minutes: int = SCENARIO_TTL_MINUTES,
                 cleanup_interval: int = CLEANUP_INTERVAL_SECONDS):
        self.session_factory = session_factory
        self.ttl = timedelta(minutes=ttl_minutes)
        self.cleanup_interval = cleanup_interval
        self.cleanup_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self.cleanup_thread is not None and self.cleanup_thread.is_alive()

    def start_cleanup(self):
        """Start the cleanup process in a separate thread"""
        if self.is_running:
            logger.warning("Scenario cleanup is already running")
            return

        self._stop_event.clear()
        self.cleanup_thread = threading.Thread(
            target=self._run_cleanup,
            daemon=True,
            name="Scenario-Cleanup"
        )
        self.cleanup_thread.start()
        logger.info("Scenario cleanup process started")

    def stop_cleanup(self):
        """Stop the cleanup process"""
        if not self.is_running:
            logger.warning("Scenario cleanup is not running")
            return

        self._stop_event.set()
        self.cleanup_thread.join(timeout=5)
        if self.cleanup_thread.is_alive():
            logger.warning("Cleanup thread did not stop gracefully")

        logger.info("Scenario cleanup process stopped")

    def _run_cleanup(self):
        """Run the cleanup loop in the background thread"""
        logger.info("Starting scenario cleanup loop")
        while not self._stop_event.is_set():
            try:
                self.cleanup_expired_scenarios()
            except Exception as e:
                logger.error(f"Error cleaning up expired scenarios: {e}")
            self._stop_event.wait(self.cleanup_interval)
        logger.info("Cleanup thread finished")

    def cleanup_expired_scenarios(self) -> int:
        """Delete scenarios older than the TTL, returning how many were removed"""
        cutoff_time = datetime.now(timezone.utc) - self.ttl
        db = self.session_factory()
        try:
            removed = delete_expired_scenarios(db, cutoff_time)
        finally:
            db.close()

        if removed:
            logger.info(f"Cleaned up {removed} expired scenarios")
        return removed


# Global cleanup manager
_cleanup_manager: Optional[ScenarioCleanupManager] = None


def get_cleanup_manager() -> ScenarioCleanupManager:
    """Get or create cleanup manager instance"""
    global _cleanup_manager
    if _cleanup_manager is None:
        _cleanup_manager = ScenarioCleanupManager()
    return _cleanup_manager


def start_scenario_cleanup():
    get_cleanup_manager().start_cleanup()


def stop_scenario_cleanup():
    get_cleanup_manager().stop_cleanup()
