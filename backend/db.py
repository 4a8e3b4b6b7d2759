import asyncio
import logging
import threading
from typing import Callable, Optional, Set

from pymongo import MongoClient

from models import SummaryRecord

logger = logging.getLogger(__name__)


class SummaryStore:
    """
    Write-only sink for generated summaries.

    The MongoClient is created on first use and shared for the life of the
    process.
    """

    def __init__(
        self,
        uri: Optional[str],
        db_name: str = "ai_summary_extension",
        collection: str = "summaries",
        client_factory: Callable[[str], MongoClient] = MongoClient,
    ):
        self.uri = uri
        self.db_name = db_name
        self.collection = collection
        self._client_factory = client_factory
        self._client = None
        self._lock = threading.Lock()
        self._pending: Set[asyncio.Task] = set()

    def get_client(self):
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._client_factory(self.uri)
        return self._client

    def save_summary(self, record: SummaryRecord) -> None:
        if not self.uri:
            logger.warning("MONGODB_URI not set, skipping summary storage")
            return

        client = self.get_client()
        client[self.db_name][self.collection].insert_one(record.to_document())

    def save_in_background(self, record: SummaryRecord) -> asyncio.Task:
        """Starts the insert without waiting on it. Errors are only logged."""
        task = asyncio.create_task(asyncio.to_thread(self.save_summary, record))
        self._pending.add(task)
        task.add_done_callback(self._on_saved)
        return task

    def _on_saved(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning("MongoDB write cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error("MongoDB error: %s", error, exc_info=error)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
