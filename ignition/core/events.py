"""Background worker that turns published events into Activity rows."""
import logging
import queue
import threading
import time
from typing import Any, Callable, Dict, Optional

from flask import Flask, current_app

from ignition.models import db, Activity

logger = logging.getLogger(__name__)

EXTENSION_KEY = "ignition_events"

_STOP = object()


def _record_user_event(topic: str, payload: Dict[str, Any]) -> None:
    user_id = payload["user_id"]
    Activity.record(topic, user_id=user_id, model="user", model_id=user_id)


def _record_database_create(topic: str, payload: Dict[str, Any]) -> None:
    Activity.record(
        topic,
        user_id=payload.get("user_id"),
        model="database",
        model_id=payload["database_id"],
        details={"name": payload.get("name"), "engine": payload.get("engine")},
    )


HANDLERS: Dict[str, Callable[[str, Dict[str, Any]], None]] = {
    "user-joined": _record_user_event,
    "user-login": _record_user_event,
    "database-create": _record_database_create,
}


class EventWorker:
    """Background worker that records published events."""

    def __init__(self, app: Flask):
        """
        Initialize the event worker.

        Args:
            app: Application whose context the handlers run in
        """
        self.app = app
        self.queue: "queue.Queue[Any]" = queue.Queue()
        self.running = False
        self.thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def start(self):
        """Start the background worker thread."""
        with self._lock:
            if self.running:
                return
            self.running = True
            self.thread = threading.Thread(
                target=self._run, name="ignition-events", daemon=True
            )
            self.thread.start()
        logger.info("Event worker started")

    def stop(self):
        """Stop the background worker thread."""
        with self._lock:
            if not self.running:
                return
            self.running = False
        self.queue.put(_STOP)
        if self.thread:
            self.thread.join(timeout=5)
        logger.info("Event worker stopped")

    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        """Queue an event for recording."""
        if topic not in HANDLERS:
            raise ValueError(f"Unknown event topic: {topic}")
        self.start()
        self.queue.put((topic, payload))

    def drain(self, timeout: float = 5.0) -> bool:
        """Wait until every queued event has been handled. False on timeout."""
        deadline = time.monotonic() + timeout
        while self.queue.unfinished_tasks:
            if time.monotonic() > deadline:
                return False
            time.sleep(0.01)
        return True

    def _run(self):
        """Main worker loop."""
        while True:
            item = self.queue.get()
            try:
                if item is _STOP:
                    break
                topic, payload = item
                self._dispatch(topic, payload)
            finally:
                self.queue.task_done()

    def _dispatch(self, topic: str, payload: Dict[str, Any]):
        with self.app.app_context():
            try:
                HANDLERS[topic](topic, payload)
                db.session.commit()
                logger.debug("Recorded %s event: %s", topic, payload)
            except Exception as e:
                db.session.rollback()
                logger.error("Error recording %s event: %s", topic, e, exc_info=True)


def init_app(app: Flask) -> EventWorker:
    worker = EventWorker(app)
    app.extensions[EXTENSION_KEY] = worker
    return worker


def get_worker(app: Optional[Flask] = None) -> EventWorker:
    app = app or current_app._get_current_object()
    return app.extensions[EXTENSION_KEY]


def publish_event(topic: str, payload: Dict[str, Any]) -> None:
    """Publish an event; it is recorded asynchronously."""
    get_worker().publish(topic, payload)
