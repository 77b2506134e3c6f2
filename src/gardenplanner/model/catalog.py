"""Predefined Garden Elements (Catalog)."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from gardenplanner.model.elements import PropertyValue

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class ElementTemplate:
    """Read-only catalog entry. Copied into a new element on placement."""
    id: str
    name: str
    type: str
    thumbnail: str
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))


def _template(
    template_id: str,
    name: str,
    element_type: str,
    /,
    **properties: PropertyValue
) -> ElementTemplate:
    # positional-only so that a "type" property (garage, shed, ...) is accepted
    return ElementTemplate(
        id=template_id,
        name=name,
        type=element_type,
        thumbnail=f"elements/{template_id}.svg",
        properties=properties,
    )


# ------------------------------------------------------------------------------
# Catalog data (ids are unique across all categories)
# ------------------------------------------------------------------------------
CATEGORY_LABELS: Dict[str, str] = {
    "garden-plan": "Garden Plan",
    "plot": "Plots & Beds",
    "houses": "Houses",
    "plants": "Plants",
    "furniture": "Furniture",
    "ponds": "Ponds & Pools",
    "notes": "Notes",
}

CATALOG: Dict[str, List[ElementTemplate]] = {
    "garden-plan": [
        _template("grass-lawn", "Grass Lawn", "surface", width=5, depth=5, material="grass"),
        _template("concrete-patio", "Concrete Patio", "surface", width=3, depth=3, material="concrete"),
        _template("brick-path", "Brick Path", "path", width=0.8, length=3, material="brick"),
        _template("wooden-deck", "Wooden Deck", "surface", width=4, depth=3, material="wood"),
        _template("gravel-area", "Gravel Area", "surface", width=2, depth=2, material="gravel"),
    ],
    "plot": [
        _template("square-garden-bed", "Square Garden Bed", "plot",
                  width=2, depth=2, height=0.3, material="soil"),
        _template("rectangular-garden-bed", "Rectangular Garden Bed", "plot",
                  width=3, depth=1.5, height=0.3, material="soil"),
        _template("raised-garden-bed", "Raised Garden Bed", "plot",
                  width=2, depth=1, height=0.6, material="wood"),
        _template("circular-garden-bed", "Circular Garden Bed", "plot",
                  radius=1.2, height=0.3, material="soil"),
        _template("vegetable-plot", "Vegetable Plot", "plot",
                  width=2.5, depth=1.5, height=0.3, material="soil"),
    ],
    "houses": [
        _template("small-house", "Small House", "house", width=8, depth=6, height=3, stories=1),
        _template("garage", "Garage", "house", width=4, depth=6, height=2.5, type="garage"),
        _template("garden-shed", "Garden Shed", "house", width=2.5, depth=2, height=2.2, type="shed"),
        _template("greenhouse", "Greenhouse", "house", width=3, depth=2, height=2.2, type="greenhouse"),
        _template("gazebo", "Gazebo", "house", width=3, depth=3, height=3, type="gazebo"),
    ],
    "plants": [
        _template("oak-tree", "Oak Tree", "tree", height=8, canopy=5, species="Oak"),
        _template("pine-tree", "Pine Tree", "tree", height=10, canopy=3, species="Pine"),
        _template("apple-tree", "Apple Tree", "tree", height=4, canopy=3, species="Apple", fruit=True),
        _template("rose-bush", "Rose Bush", "bush", height=1, width=0.8, species="Rose", flowering=True),
        _template("lavender", "Lavender", "flower", height=0.5, spacing=0.3, species="Lavender", flowering=True),
        _template("tulips", "Tulips", "flower", height=0.4, spacing=0.2, species="Tulip", flowering=True),
        _template("hedge", "Hedge", "hedge", height=1.5, length=3, width=0.5, species="Boxwood"),
        _template("grass-patch", "Ornamental Grass", "grass", height=1.2, width=1, species="Pampas Grass"),
        _template("sunflower", "Sunflower", "flower", height=2, spacing=0.5, species="Sunflower", flowering=True),
        _template("maple-tree", "Maple Tree", "tree", height=7, canopy=4, species="Maple"),
    ],
    "furniture": [
        _template("garden-bench", "Garden Bench", "furniture", width=1.5, depth=0.6, height=0.8, material="wood"),
        _template("dining-set", "Outdoor Dining Set", "furniture", width=2, depth=2, height=0.75, seating=4),
        _template("lounge-chair", "Lounge Chair", "furniture", width=0.7, depth=1.5, height=0.4, material="wood"),
        _template("grill", "BBQ Grill", "furniture", width=0.8, depth=0.6, height=1, type="grill"),
        _template("umbrella", "Patio Umbrella", "furniture", radius=1.5, height=2.5, color="blue"),
    ],
    "ponds": [
        _template("small-pond", "Small Pond", "pond", radius=1, depth=0.5, shape="circular"),
        _template("large-pond", "Large Pond", "pond", width=3, depth=1, length=4, shape="irregular"),
        _template("fountain", "Fountain", "fountain", radius=0.8, height=1.5, type="tiered"),
        _template("swimming-pool", "Swimming Pool", "pool", width=5, length=8, depth=1.8, shape="rectangular"),
        _template("hot-tub", "Hot Tub", "pool", radius=1.2, depth=0.8, shape="circular"),
    ],
    "notes": [
        _template("text-note", "Text Note", "note", text="Edit this note", fontSize=14, color="black"),
        _template("measurement", "Measurement", "measurement", length=2, unit="m", color="red"),
        _template("arrow", "Arrow", "arrow", length=1.5, color="black", width=0.1),
    ],
}


# ------------------------------------------------------------------------------
# Lookup
# ------------------------------------------------------------------------------
def list_categories() -> List[str]:
    return list(CATALOG.keys())


def get_elements_by_category(category: str) -> List[ElementTemplate]:
    """Templates of a category in catalog order; empty for unknown categories."""
    return list(CATALOG.get(category, []))


def get_element_by_id(template_id: str) -> Optional[ElementTemplate]:
    """Scan every category and return the first template with this id."""
    for category, templates in CATALOG.items():
        for template in templates:
            if template.id == template_id:
                logger.debug(f"Found template '{template_id}' in category '{category}'.")
                return template

    logger.warning(f"Element template not found with ID: {template_id}")
    return None


def search_elements(term: str) -> List[ElementTemplate]:
    """
    Case-insensitive substring search on the template name or its species.
    Results are concatenated in catalog order; duplicates are not removed.
    """
    needle = term.lower()
    results: List[ElementTemplate] = []

    for templates in CATALOG.values():
        for template in templates:
            species = template.properties.get("species")
            if needle in template.name.lower() or (
                isinstance(species, str) and needle in species.lower()
            ):
                results.append(template)

    return results
