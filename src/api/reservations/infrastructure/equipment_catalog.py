"""Static equipment catalog.

The campus inventory changes rarely, so it ships as reference data rather
than a table.
"""

from __future__ import annotations

from collections.abc import Iterable

from reservations.domain.value_objects import Equipment
from reservations.ports.repositories import IEquipmentCatalog

DEFAULT_EQUIPMENT: tuple[Equipment, ...] = (
    Equipment(
        id="1",
        name="Projector",
        category="Presentation",
        total_available=12,
        description="High-definition projectors for lectures and presentations",
    ),
    Equipment(
        id="2",
        name="Laptop",
        category="Computing",
        total_available=25,
        description="Modern laptops for student projects and coursework",
    ),
    Equipment(
        id="3",
        name="Microscope",
        category="Laboratory",
        total_available=8,
        description="Advanced microscopes for science labs and research",
    ),
    Equipment(
        id="4",
        name="Video Camera",
        category="Media",
        total_available=5,
        description="Professional cameras for media and film projects",
    ),
    Equipment(
        id="5",
        name="Smart Whiteboard",
        category="Presentation",
        total_available=6,
        description="Interactive digital whiteboards for collaborative learning",
    ),
    Equipment(
        id="6",
        name="Audio System",
        category="Audio",
        total_available=10,
        description="Premium sound systems for events and presentations",
    ),
)


class StaticEquipmentCatalog(IEquipmentCatalog):
    """In-memory catalog looked up by ID or exact name."""

    def __init__(self, items: Iterable[Equipment] = DEFAULT_EQUIPMENT) -> None:
        self._items = list(items)
        self._by_id = {item.id: item for item in self._items}
        self._by_name = {item.name: item for item in self._items}

    def get(self, ref: str) -> Equipment | None:
        """Find an item by catalog ID, falling back to exact name."""
        return self._by_id.get(ref) or self._by_name.get(ref)

    def list_all(self) -> list[Equipment]:
        """List every catalog item in catalog order."""
        return list(self._items)
