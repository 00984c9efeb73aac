# roamly/io/repository.py
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roamly.domain.entities.destination import Destination
from roamly.domain.entities.geography import VehicleKind

log = logging.getLogger(__name__)


class DestinationRecord(BaseModel):
    """One persisted destination; mirrors the ``destinations.json`` layout."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    id: int
    type: VehicleKind
    start: tuple[float, float]
    coords: tuple[float, float]
    name: str
    date: str = ""
    description: str = ""
    image_url: str | None = Field(default=None, alias="imageUrl")
    video_url: str | None = Field(default=None, alias="videoUrl")

    @field_validator("image_url", "video_url", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_entity(self) -> Destination:
        return Destination(
            id=self.id,
            kind=self.type,
            start=self.start,
            end=self.coords,
            name=self.name,
            date=self.date,
            description=self.description,
            image_url=self.image_url,
            video_url=self.video_url,
        )

    @classmethod
    def from_entity(cls, d: Destination) -> "DestinationRecord":
        return cls(
            id=d.id,
            type=d.kind,
            start=d.start,
            coords=d.end,
            name=d.name,
            date=d.date,
            description=d.description,
            image_url=d.image_url,
            video_url=d.video_url,
        )


class DestinationsFile(BaseModel):
    destinations: list[DestinationRecord]


def parse_destinations(raw: Any) -> list[Destination]:
    return [r.to_entity() for r in DestinationsFile.model_validate(raw).destinations]


class InMemoryRepository:
    """Destination store; ``load`` returns whatever it was seeded with."""

    def __init__(self, destinations: list[Destination] | None = None):
        self._seed = list(destinations or [])
        self._destinations: list[Destination] = []
        self._loaded = False

    def _read(self) -> list[Destination]:
        return list(self._seed)

    def load(self) -> list[Destination]:
        self._destinations = self._read()
        self._loaded = True
        return list(self._destinations)

    def is_loaded(self) -> bool:
        return self._loaded

    def all(self) -> list[Destination]:
        if not self._loaded:
            raise RuntimeError("destinations have not been loaded yet")
        return list(self._destinations)

    def get_by_id(self, destination_id: int) -> Destination | None:
        return next((d for d in self._destinations if d.id == destination_id), None)

    def get_by_kind(self, kind: VehicleKind) -> list[Destination]:
        return [d for d in self._destinations if d.kind == kind]

    def add(self, destination: Destination) -> None:
        if self.get_by_id(destination.id) is not None:
            raise ValueError(f"destination {destination.id} already exists")
        DestinationRecord.from_entity(destination)
        self._destinations.append(destination)

    def remove(self, destination_id: int) -> bool:
        for i, d in enumerate(self._destinations):
            if d.id == destination_id:
                del self._destinations[i]
                return True
        return False

    def update(self, destination_id: int, **changes: Any) -> Destination | None:
        if "id" in changes and changes["id"] != destination_id:
            raise ValueError("destination id cannot be changed")
        for i, d in enumerate(self._destinations):
            if d.id == destination_id:
                updated = replace(d, **changes)
                # same rules as the file: known kind, two-number coordinates
                updated = DestinationRecord.from_entity(updated).to_entity()
                self._destinations[i] = updated
                return updated
        return None


class JsonDestinationRepository(InMemoryRepository):
    """Reads ``{"destinations": [...]}`` from a JSON file; ``save`` writes it back."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)

    def _read(self) -> list[Destination]:
        if not self.path.exists():
            raise FileNotFoundError(self.path)
        with self.path.open("r", encoding="utf8") as handle:
            raw = json.load(handle)
        destinations = parse_destinations(raw)
        log.debug("read %d destinations from %s", len(destinations), self.path)
        return destinations

    def save(self) -> None:
        payload = {
            "destinations": [
                DestinationRecord.from_entity(d).model_dump(by_alias=True, exclude_none=True)
                for d in self.all()
            ]
        }
        with self.path.open("w", encoding="utf8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
