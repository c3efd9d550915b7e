"""GeoJSON export of territories for the map view."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ...models.domain import Partner, Territory
from ..geometry import to_persisted


def generate_territory_color(index: int) -> str:
    """Generate distinct colors for territories."""
    colors = [
        "#02d8e0", "#e0003e", "#38e000", "#0000c1", "#e0e005",
        "#611cc7", "#e0af00", "#13aae0", "#a4d819", "#00e0bb",
        "#e000a2", "#e000e0", "#09e0e0", "#e0002f", "#22e000",
        "#15dde0", "#e00017", "#08e000", "#3100e0", "#e0bb0b",
    ]
    return colors[index % len(colors)]


def territories_to_feature_collection(
    territories: Sequence[Territory],
    partners: Mapping[str, Partner],
    highlighted_ids: Sequence[str] = (),
) -> dict[str, Any]:
    """Build a FeatureCollection with one feature per territory.

    Territories without usable geometry are left out. Partners get a stable
    color based on their position in the partner list.
    """

    partner_colors = {partner_id: generate_territory_color(idx) for idx, partner_id in enumerate(sorted(partners))}
    highlighted = set(highlighted_ids)
    features: list[dict[str, Any]] = []

    for territory in territories:
        if not territory.polygons:
            continue
        partner = partners.get(territory.partner_id)
        features.append(
            {
                "type": "Feature",
                "id": territory.id,
                "geometry": to_persisted(territory.polygons),
                "properties": {
                    "id": territory.id,
                    "name": territory.display_name,
                    "partner_id": territory.partner_id,
                    "partner_name": partner.name if partner else None,
                    "partner_active": partner.active if partner else None,
                    "priority": territory.priority,
                    "color": partner_colors.get(territory.partner_id, generate_territory_color(0)),
                    "highlighted": territory.id in highlighted,
                },
            }
        )

    return {"type": "FeatureCollection", "features": features}
