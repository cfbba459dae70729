"""
Resource pool.

Holds the resources nobody is working with. A resource leaves the pool when
allocated to a story and comes back when released; the pool never holds the
same resource twice.
"""

import logging
from typing import Optional

from kanban.lib.types import ResourceKind
from kanban.pm.models import Resource

logger = logging.getLogger(__name__)


class ResourcePool:
    """Available resources, plus a directory of every resource in the game."""

    def __init__(self, resources: list[Resource]):
        self._resources: dict[str, Resource] = {}
        for resource in resources:
            if resource.id in self._resources:
                raise ValueError(f"Duplicate resource id: {resource.id}")
            self._resources[resource.id] = resource
        self._available: list[Resource] = list(resources)

    @classmethod
    def create(cls, per_kind: int = 3) -> "ResourcePool":
        """Build the starting pool: per_kind analysts, developers and testers.

        Ids share one counter across kinds (analyst_1..3, developer_4..6, ...).
        """
        resources = []
        next_id = 1
        for kind in ResourceKind:
            for _ in range(per_kind):
                resources.append(Resource(id=f"{kind.value}_{next_id}", kind=kind))
                next_id += 1
        return cls(resources)

    def get(self, resource_id: str) -> Optional[Resource]:
        """Look up any resource by id, allocated or not."""
        return self._resources.get(resource_id)

    def all_resources(self) -> list[Resource]:
        return list(self._resources.values())

    def is_available(self, resource_id: str) -> bool:
        return any(r.id == resource_id for r in self._available)

    def allocate(self, resource_id: str) -> Optional[Resource]:
        """Take a resource out of the pool.

        Returns None if the resource is not in the pool.
        """
        for i, resource in enumerate(self._available):
            if resource.id == resource_id:
                logger.debug(f"[POOL] {resource_id} allocated")
                return self._available.pop(i)
        return None

    def release(self, resource: Resource) -> bool:
        """Put a resource back. No-op if it is already in the pool.

        Returns True if the resource was added.
        """
        if self.is_available(resource.id):
            return False
        self._available.append(resource)
        logger.debug(f"[POOL] {resource.id} released")
        return True

    def available(self) -> list[Resource]:
        """Available resources in pool order."""
        return list(self._available)

    def available_count(self) -> int:
        return len(self._available)
