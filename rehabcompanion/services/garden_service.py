"""Garden read service."""

from __future__ import annotations

from dataclasses import dataclass

from rehabcompanion.engine.garden import GardenSnapshot, stage_progress
from rehabcompanion.services.storage import Storage


@dataclass
class GardenOverview:
    garden: GardenSnapshot
    next_stage_xp: int | None
    progress_percentage: float


def get_garden_overview(storage: Storage, user_id: int) -> GardenOverview:
    """Garden of ``user_id`` with progress towards the next stage. Creates an empty garden on first view."""
    garden = storage.load_garden_state(user_id)
    if garden is None:
        garden = GardenSnapshot.new(user_id)
        storage.save_garden_state(garden)
        storage.commit()
    next_xp, pct = stage_progress(garden)
    return GardenOverview(garden=garden, next_stage_xp=next_xp, progress_percentage=pct)
