"""Grouped writes against PocketBase.

A donor change is always two writes: the donor record and the camp's
inventory counters. WriteBatch sends them through PocketBase's batch endpoint
(`POST /api/batch`), which runs every sub-request in one transaction. With
`transactional=False` the writes are dispatched concurrently as independent
calls instead; a reader can then observe one without the other."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from pocketbase import PocketBase

from ..errors import ExternalStoreError
from ..logging_config import TRACE

logger = logging.getLogger(__name__)

BATCH_PATH = "/api/batch"


@dataclass
class WriteOp:
    """One create/update/delete against a collection"""

    method: str  # "POST", "PATCH" or "DELETE"
    collection: str
    record_id: str | None = None
    body: dict[str, Any] | None = None

    @property
    def url(self) -> str:
        base = f"/api/collections/{self.collection}/records"
        return f"{base}/{self.record_id}" if self.record_id else base

    def to_batch_request(self) -> dict[str, Any]:
        request: dict[str, Any] = {"method": self.method, "url": self.url}
        if self.body is not None:
            request["body"] = self.body
        return request

    def apply(self, client: PocketBase) -> Any:
        """Run this write as a standalone SDK call"""
        service = client.collection(self.collection)
        if self.method == "POST":
            return service.create(self.body or {})
        if self.method == "PATCH":
            return service.update(self.record_id, self.body or {})
        if self.method == "DELETE":
            return service.delete(self.record_id)
        raise ValueError(f"Unsupported write method: {self.method}")


class WriteBatch:
    """Collects writes and commits them together.

    Usage:
        batch = WriteBatch(pb, transactional=True)
        batch.add(donor_repo.create_op(fields))
        batch.add(camp_repo.adjust_inventory_op(camp_id, {BloodType.A_POS: 2}))
        results = await batch.commit("saving donor")
    """

    def __init__(self, client: PocketBase, transactional: bool = True) -> None:
        self.client = client
        self.transactional = transactional
        self._ops: list[WriteOp] = []

    def add(self, op: WriteOp | None) -> WriteBatch:
        """Queue a write. None is ignored so callers can pass optional ops."""
        if op is not None:
            self._ops.append(op)
        return self

    @property
    def ops(self) -> list[WriteOp]:
        return list(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    async def commit(self, action: str) -> list[Any]:
        """Send the queued writes.

        Args:
            action: Human-readable action for error messages (e.g. "saving donor")

        Returns:
            One result per op, in queue order: the written record (dict in
            transactional mode, SDK Record otherwise) or None for deletes.

        Raises:
            ExternalStoreError: if any write failed. In transactional mode
                nothing was applied; otherwise the successful writes stay applied.
        """
        if not self._ops:
            return []

        logger.log(TRACE, f"Committing {len(self._ops)} write(s) for {action}: {[op.url for op in self._ops]}")

        if self.transactional:
            return await self._commit_transactional(action)
        return await self._commit_concurrently(action)

    async def _commit_transactional(self, action: str) -> list[Any]:
        payload = {"requests": [op.to_batch_request() for op in self._ops]}
        try:
            response = await asyncio.to_thread(self.client.send, BATCH_PATH, {"method": "POST", "body": payload})
        except Exception as e:
            logger.error(f"Batch of {len(self._ops)} write(s) rejected while {action}: {e}")
            raise ExternalStoreError(action, e) from e

        return [item.get("body") if isinstance(item, dict) else None for item in (response or [])]

    async def _commit_concurrently(self, action: str) -> list[Any]:
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(op.apply, self.client) for op in self._ops),
            return_exceptions=True,
        )

        failures = [(op, outcome) for op, outcome in zip(self._ops, outcomes) if isinstance(outcome, BaseException)]
        for op, error in failures:
            logger.error(f"{op.method} {op.url} failed while {action}: {error}")
        if failures:
            applied = len(self._ops) - len(failures)
            if applied:
                logger.warning(f"{applied} of {len(self._ops)} write(s) for {action} were applied and not rolled back")
            raise ExternalStoreError(action, failures[0][1]) from failures[0][1]

        return [None if op.method == "DELETE" else outcome for op, outcome in zip(self._ops, outcomes)]
