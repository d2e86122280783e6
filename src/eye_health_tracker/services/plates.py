"""Plate catalog access and sampling."""

import random
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field

from eye_health_tracker.domain.color_vision import Plate
from eye_health_tracker.services.errors import PlateCatalogError


@dataclass(frozen=True)
class PlateCatalog:
    """Immutable deck of stimulus plates."""

    plates: tuple[Plate, ...]
    _by_id: dict[int, Plate] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_id: dict[int, Plate] = {}
        for plate in self.plates:
            if plate.id in by_id:
                raise PlateCatalogError(f"Duplicate plate id {plate.id}")
            by_id[plate.id] = plate
        object.__setattr__(self, "_by_id", by_id)

    @classmethod
    def from_plates(cls, plates: Iterable[Plate]) -> "PlateCatalog":
        """Build a catalog from any iterable of plates."""
        return cls(plates=tuple(plates))

    def __len__(self) -> int:
        return len(self.plates)

    @property
    def plate_by_id(self) -> Mapping[int, Plate]:
        """Return a read-only lookup of plates by id."""
        return dict(self._by_id)

    def get(self, plate_id: int) -> Plate | None:
        """Return a plate by id, if present."""
        return self._by_id.get(plate_id)

    def sample_initial(self, count: int, rng: random.Random) -> list[Plate]:
        """Draw `count` distinct plates uniformly at random."""
        if count > len(self.plates):
            raise PlateCatalogError(
                f"Catalog has {len(self.plates)} plates, {count} required"
            )
        return rng.sample(self.plates, count)

    def sample_follow_up(
        self, exclude_ids: Collection[int], max_count: int
    ) -> list[Plate]:
        """Return up to `max_count` discriminative plates not yet used."""
        if max_count <= 0:
            return []
        selected: list[Plate] = []
        for plate in self.plates:
            if plate.id in exclude_ids or not plate.is_discriminative:
                continue
            selected.append(plate)
            if len(selected) == max_count:
                break
        return selected
