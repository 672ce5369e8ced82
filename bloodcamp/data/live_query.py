"""Full-snapshot live queries over PocketBase realtime.

PocketBase realtime pushes one event per changed record. Consumers here want
the whole filtered result set instead, so every event triggers a fresh query
and the complete snapshot is handed to the callback. Derived views are then
recomputed from scratch; nothing is diffed."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pocketbase import PocketBase

from ..logging_config import TRACE

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveQuery(Generic[T]):
    """Subscription to a filtered collection query.

    Usage:
        query = LiveQuery(pb, "donors", donor_repo.map_from_db, on_snapshot=render,
                          filter_str='camp = "abc123"')
        query.start()   # subscribes and delivers the initial snapshot
        ...
        query.stop()    # no further snapshots; in-flight writes are unaffected
    """

    def __init__(
        self,
        pb_client: PocketBase,
        collection: str,
        mapper: Callable[[Any], T],
        on_snapshot: Callable[[list[T]], None],
        filter_str: str = "",
        name: str | None = None,
    ) -> None:
        self.pb = pb_client
        self.collection = collection
        self.mapper = mapper
        self.on_snapshot = on_snapshot
        self.filter_str = filter_str
        self.name = name or collection
        self._unsubscribe: Callable[[], Any] | None = None
        self._active = False
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> LiveQuery[T]:
        if self._active:
            return self
        self._active = True
        self._unsubscribe = self.pb.collection(self.collection).subscribe(self._on_event)
        logger.debug(f"Live query {self.name!r} subscribed (filter: {self.filter_str or '<none>'})")
        self.refresh()
        return self

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._unsubscribe is not None:
            try:
                self._unsubscribe()
            except Exception as e:
                logger.warning(f"Error unsubscribing live query {self.name!r}: {e}")
            self._unsubscribe = None
        logger.debug(f"Live query {self.name!r} stopped")

    def fetch(self) -> list[T]:
        """Run the query once and return the mapped result set"""
        query_params = {"filter": self.filter_str} if self.filter_str else None
        records = self.pb.collection(self.collection).get_full_list(query_params=query_params)
        return [self.mapper(record) for record in records]

    def refresh(self) -> None:
        """Re-run the query and deliver the full snapshot.

        Runs on the realtime listener thread, so failures are logged and the
        subscription stays open for the next event.
        """
        if not self._active:
            return
        with self._lock:
            try:
                snapshot = self.fetch()
            except Exception as e:
                logger.error(f"Live query {self.name!r} refresh failed: {e}")
                return
            if not self._active:
                return
            logger.log(TRACE, f"Live query {self.name!r} delivering {len(snapshot)} item(s)")
            self.on_snapshot(snapshot)

    def _on_event(self, event: Any) -> None:
        logger.log(TRACE, f"Realtime {getattr(event, 'action', '?')} on {self.collection}")
        self.refresh()
