"""
Application service: Farm records.
"""
from typing import List, Optional
import logging

from forge.domain.errors import NotFoundError, ValidationError
from forge.domain.models import Farm, FarmPatch
from forge.infrastructure.repositories import FarmRepository

logger = logging.getLogger(__name__)


class FarmService:
    """CRUD over the owner's farms."""

    def __init__(self, farms: FarmRepository):
        self.farms = farms

    def _require(self, owner_id: str, farm_id: str) -> Farm:
        farm = self.farms.get(owner_id, farm_id)
        if farm is None:
            raise NotFoundError("Farm not found")
        return farm

    def list_farms(self, owner_id: str) -> List[Farm]:
        return self.farms.list(owner_id)

    def get_farm(self, owner_id: str, farm_id: str) -> Farm:
        return self._require(owner_id, farm_id)

    def create_farm(
        self,
        owner_id: str,
        name: Optional[str],
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Farm:
        if name is None or not name.strip():
            raise ValidationError("Farm name is required")

        farm = self.farms.create(Farm(
            owner_id=owner_id,
            name=name.strip(),
            description=description,
            location=location,
        ))
        logger.info(f"Created farm {farm.id} for owner {owner_id}")
        return farm

    def update_farm(self, owner_id: str, farm_id: str, patch: FarmPatch) -> Farm:
        changes = patch.changes()
        if "name" in changes:
            if changes["name"] is None or not changes["name"].strip():
                raise ValidationError("Farm name is required")
            changes["name"] = changes["name"].strip()

        farm = self.farms.update(owner_id, farm_id, changes)
        if farm is None:
            raise NotFoundError("Farm not found")
        return farm

    def delete_farm(self, owner_id: str, farm_id: str) -> None:
        if not self.farms.delete(owner_id, farm_id):
            raise NotFoundError("Farm not found")
        logger.info(f"Deleted farm {farm_id}")
