"""
Placemark classification for site ingestion.

Decides whether a surveyed polygon is a project boundary, an exclusion
zone (and which type), or a derived result to ignore. Rules are applied
in priority order and the first match wins:

1. Folder path mentions derived results ("buildable", "setback area") -> skip
2. Folder path is a parcel boundary folder -> boundary
3. Folder path is an exclusion folder -> exclusion, typed from the folder
   label, then from name/description keywords, else "other"
4. Keyword match on name + description (KEYWORD_RULES order)
5. Otherwise -> boundary

Reordering the rules changes results for ambiguous names.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from sitelayout.models.exclusion_zone import ExclusionZoneType


class PlacemarkKind(str, Enum):
    """What an ingested polygon represents."""
    BOUNDARY = "boundary"
    EXCLUSION = "exclusion"
    SKIP = "skip"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one placemark."""
    kind: PlacemarkKind
    zone_type: Optional[ExclusionZoneType] = None


BOUNDARY = Classification(PlacemarkKind.BOUNDARY)
SKIP = Classification(PlacemarkKind.SKIP)

# Folder path fragments (lower-cased)
SKIP_FOLDER_MARKERS = ("buildable", "setback area")
BOUNDARY_FOLDER_MARKER = "parcel boundary"
EXCLUSION_FOLDER_MARKER = "exclusion"

# Sub-type keywords checked against the immediate folder label
FOLDER_SUBTYPE_RULES: list[tuple[ExclusionZoneType, tuple[str, ...]]] = [
    (ExclusionZoneType.SLOPE, ("slope",)),
    (ExclusionZoneType.TREE_COVER, ("tree", "forest")),
    (ExclusionZoneType.WETLAND, ("wetland",)),
    (ExclusionZoneType.FLOOD_ZONE, ("flood",)),
]

# Checked in order against lower-cased text; plain substring match
KEYWORD_RULES: list[tuple[ExclusionZoneType, tuple[str, ...]]] = [
    (ExclusionZoneType.WETLAND, ("wetland", "marsh", "swamp")),
    (ExclusionZoneType.WATER_BODY, ("pond", "lake", "stream", "creek", "river", "water")),
    (ExclusionZoneType.TREE_COVER, ("tree", "forest", "vegetation", "wooded", "timber")),
    (ExclusionZoneType.STRUCTURE, ("house", "building", "structure", "barn", "shed", "dwelling")),
    (ExclusionZoneType.SETBACK, ("setback", "buffer")),
    (ExclusionZoneType.EASEMENT, ("easement", "right-of-way", "row")),
    (ExclusionZoneType.SLOPE, ("slope", "steep", "grade")),
    (ExclusionZoneType.FLOOD_ZONE, ("flood", "floodplain", "fema")),
    (ExclusionZoneType.OTHER, ("exclusion", "exclude", "restricted", "no-build")),
]

BUILDABLE_AREA_MARKER = "buildable area"


def match_zone_keywords(text: str) -> Optional[ExclusionZoneType]:
    """First exclusion type whose keywords appear in the text."""
    lowered = text.lower()
    for zone_type, keywords in KEYWORD_RULES:
        if any(keyword in lowered for keyword in keywords):
            return zone_type
    return None


def classify_by_text(name: str, description: str = "") -> Classification:
    """Classify purely from placemark name and description."""
    text = f"{name} {description}".lower()

    zone_type = match_zone_keywords(text)
    if zone_type is not None:
        return Classification(PlacemarkKind.EXCLUSION, zone_type)

    if BUILDABLE_AREA_MARKER in text:
        return SKIP

    return BOUNDARY


def classify_placemark(
    name: str,
    description: str = "",
    folder_path: Sequence[str] = (),
) -> Classification:
    """
    Classify a placemark using its folder context first, then its text.

    Args:
        name: Placemark name
        description: Placemark description (may be empty)
        folder_path: Ancestor folder names, outermost first
    """
    folders = [f.lower().strip() for f in folder_path if f]
    path = " / ".join(folders)

    if any(marker in path for marker in SKIP_FOLDER_MARKERS):
        return SKIP

    if BOUNDARY_FOLDER_MARKER in path:
        return BOUNDARY

    if EXCLUSION_FOLDER_MARKER in path:
        label = folders[-1]
        for zone_type, keywords in FOLDER_SUBTYPE_RULES:
            if any(keyword in label for keyword in keywords):
                return Classification(PlacemarkKind.EXCLUSION, zone_type)

        zone_type = match_zone_keywords(f"{name} {description}")
        return Classification(PlacemarkKind.EXCLUSION, zone_type or ExclusionZoneType.OTHER)

    return classify_by_text(name, description)
