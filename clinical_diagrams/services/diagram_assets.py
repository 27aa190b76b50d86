"""
Diagram asset table.

Maps a diagram view and patient gender onto the rendering asset used by
the diagram renderer (image path, coordinate JSON key, dimensions).
"""

from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.models.analysis_models import DiagramAsset, DiagramView

logger = get_logger(__name__)

SUPPORTED_GENDERS = ("male", "female")
DEFAULT_GENDER = "male"

# view -> (display priority, mirrored, width, height)
_VIEW_LAYOUT: dict[DiagramView, tuple[int, bool, int, int]] = {
    DiagramView.FRONT: (1, False, 750, 1140),
    DiagramView.BACK: (2, False, 750, 1140),
    DiagramView.LEFTSIDE: (3, True, 750, 1140),
    DiagramView.RIGHTSIDE: (3, False, 750, 1140),
    DiagramView.CARDIORESPI: (4, False, 800, 1200),
    DiagramView.ABDOMINALLINGUINAL: (5, False, 800, 1200),
}


def normalize_gender(gender: str | None) -> str:
    """Return 'male' or 'female'; anything else becomes 'male' with a warning."""
    value = gender.strip().lower() if isinstance(gender, str) else ""
    if value in SUPPORTED_GENDERS:
        return value
    logger.warning("Unsupported patient gender, using default", gender=gender, default=DEFAULT_GENDER)
    return DEFAULT_GENDER


def asset_id(view: DiagramView | str, gender: str) -> str:
    return f"{gender}{DiagramView(view).value}"


def resolve_asset(view: DiagramView | str, gender: str) -> DiagramAsset:
    """Build the asset record for a view and gender."""
    view = DiagramView(view)
    gender = normalize_gender(gender)
    priority, mirrored, width, height = _VIEW_LAYOUT[view]
    identifier = asset_id(view, gender)
    return DiagramAsset(
        view=view,
        asset_id=identifier,
        image_path=f"/medical-images/{identifier}.png",
        json_key=f"{identifier}.png",
        priority=priority,
        mirror_image=mirrored,
        width=width,
        height=height,
    )


def get_diagram_assets(gender: str) -> dict[DiagramView, DiagramAsset]:
    """All assets for a gender, keyed by view, in display priority order."""
    gender = normalize_gender(gender)
    return {view: resolve_asset(view, gender) for view in _VIEW_LAYOUT}
