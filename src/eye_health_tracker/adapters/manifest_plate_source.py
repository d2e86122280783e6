"""JSON manifest loader for the plate catalog."""

import json
from pathlib import Path

from pydantic import BaseModel, ValidationError

from eye_health_tracker.domain.color_vision import Plate
from eye_health_tracker.services.errors import PlateCatalogError
from eye_health_tracker.services.plates import PlateCatalog

DEFAULT_MANIFEST_PATH = (
    Path(__file__).resolve().parents[1] / "data" / "ishihara_plates.json"
)


class PlateAnalysis(BaseModel):
    """Expected readings for a plate."""

    raw: str | None = None
    normal: str | None = None
    protan: str | None = None
    deutan: str | None = None


class ManifestPlate(BaseModel):
    """Manifest entry for one plate."""

    id: int
    image: str
    analysis: PlateAnalysis


class PlateManifest(BaseModel):
    """Top-level manifest payload."""

    plates: list[ManifestPlate]


def parse_manifest(payload: object) -> PlateCatalog:
    """Validate a decoded manifest and build the catalog."""
    try:
        manifest = PlateManifest.model_validate(payload)
    except ValidationError as exc:
        raise PlateCatalogError(f"Invalid plate manifest: {exc}") from exc
    return PlateCatalog.from_plates(_to_plate(entry) for entry in manifest.plates)


def load_plate_catalog(path: str | Path | None = None) -> PlateCatalog:
    """Load the plate catalog from a manifest file."""
    manifest_path = Path(path) if path else DEFAULT_MANIFEST_PATH
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PlateCatalogError(
            f"Failed to read plate manifest {manifest_path}"
        ) from exc
    return parse_manifest(payload)


def _to_plate(entry: ManifestPlate) -> Plate:
    analysis = entry.analysis
    return Plate(
        id=entry.id,
        image_ref=entry.image,
        expected_normal=analysis.normal or "",
        expected_protan=analysis.protan or None,
        expected_deutan=analysis.deutan or None,
    )
