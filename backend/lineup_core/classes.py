from __future__ import annotations

import uuid
from typing import Iterable, List, Optional

from .entrant import RaceClass

DEFAULT_CLASSES = (
    RaceClass(id="1", name="Super Late Models"),
    RaceClass(id="2", name="Limited Late Models"),
    RaceClass(id="3", name="Street Stock"),
)


class ClassRegistry:
    """In-memory list of race classes, kept in the order they were added."""

    def __init__(self, classes: Optional[Iterable[RaceClass]] = None) -> None:
        self._classes: List[RaceClass] = list(DEFAULT_CLASSES if classes is None else classes)

    def list_classes(self) -> List[RaceClass]:
        return list(self._classes)

    def find_class(self, class_id: str) -> Optional[RaceClass]:
        for race_class in self._classes:
            if race_class.id == class_id:
                return race_class
        return None

    def find_by_name(self, name: str) -> Optional[RaceClass]:
        wanted = name.strip().casefold()
        for race_class in self._classes:
            if race_class.name.casefold() == wanted:
                return race_class
        return None

    def add_class(self, name: str, description: Optional[str] = None, class_id: Optional[str] = None) -> RaceClass:
        name = (name or "").strip()
        if not name:
            raise ValueError("Class name is required")
        class_id = (class_id or "").strip() or str(uuid.uuid4())
        if self.find_class(class_id) is not None:
            raise ValueError(f"Class id '{class_id}' already exists")
        race_class = RaceClass(id=class_id, name=name, description=description or None)
        self._classes.append(race_class)
        return race_class

    def update_class(self, updated: RaceClass) -> RaceClass:
        if not updated.name.strip():
            raise ValueError("Class name is required")
        for index, race_class in enumerate(self._classes):
            if race_class.id == updated.id:
                self._classes[index] = updated
                return updated
        raise LookupError(f"Class '{updated.id}' not found")

    def remove_class(self, class_id: str) -> RaceClass:
        race_class = self.find_class(class_id)
        if race_class is None:
            raise LookupError(f"Class '{class_id}' not found")
        self._classes = [c for c in self._classes if c.id != class_id]
        return race_class

    def __len__(self) -> int:
        return len(self._classes)
