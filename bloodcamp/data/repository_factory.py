"""
RepositoryFactory - Centralized repository instantiation.

All repositories created by one factory share the same PocketBase client, so a
WriteBatch built from the factory can mix donor and camp writes.
"""

from __future__ import annotations

from pocketbase import PocketBase

from .batch import WriteBatch
from .repositories import CampRepository, DonorRepository, RequestRepository


class RepositoryFactory:
    """
    Factory for creating and caching repository instances.

    Usage:
        factory = RepositoryFactory(pb_client)
        camp = factory.camps.get(camp_id)
        batch = factory.batch(transactional=True)
    """

    def __init__(self, pb_client: PocketBase):
        self._pb_client = pb_client
        self._camps: CampRepository | None = None
        self._donors: DonorRepository | None = None
        self._requests: RequestRepository | None = None

    @property
    def client(self) -> PocketBase:
        return self._pb_client

    @property
    def camps(self) -> CampRepository:
        if self._camps is None:
            self._camps = CampRepository(self._pb_client)
        return self._camps

    @property
    def donors(self) -> DonorRepository:
        if self._donors is None:
            self._donors = DonorRepository(self._pb_client)
        return self._donors

    @property
    def requests(self) -> RequestRepository:
        if self._requests is None:
            self._requests = RequestRepository(self._pb_client)
        return self._requests

    def batch(self, transactional: bool = True) -> WriteBatch:
        """Start a new group of writes on the shared client"""
        return WriteBatch(self._pb_client, transactional=transactional)
