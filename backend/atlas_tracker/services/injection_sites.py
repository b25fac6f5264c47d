from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from atlas_tracker.models.enums import CompoundCategory, Laterality, Modality

L, R, C = Laterality.LEFT, Laterality.RIGHT, Laterality.CENTER
IM, SUBQ = Modality.INTRAMUSCULAR, Modality.SUBCUTANEOUS


@dataclass(frozen=True)
class Site:
    id: str
    display_name: str
    short_name: str
    body_part: str
    laterality: Laterality
    modality: Modality


# --- CATALOGS (declaration order matters for tie-breaks) ---

SITES_IM = [
    Site("glute_left", "Left Glute", "L Glute", "Glute", L, IM),
    Site("glute_right", "Right Glute", "R Glute", "Glute", R, IM),
    Site("delt_left", "Left Delt", "L Delt", "Delt", L, IM),
    Site("delt_right", "Right Delt", "R Delt", "Delt", R, IM),
    Site("quad_left", "Left Quad", "L Quad", "Quad", L, IM),
    Site("quad_right", "Right Quad", "R Quad", "Quad", R, IM),
    # Ventrogluteal
    Site("vg_left", "Left VG", "L VG", "Ventrogluteal", L, IM),
    Site("vg_right", "Right VG", "R VG", "Ventrogluteal", R, IM),
]

SITES_SUBQ = [
    # Belly, either side of the navel
    Site("left_belly_upper", "Left of Navel - Upper", "L Belly U", "Belly", L, SUBQ),
    Site("left_belly_lower", "Left of Navel - Lower", "L Belly L", "Belly", L, SUBQ),
    Site("right_belly_upper", "Right of Navel - Upper", "R Belly U", "Belly", R, SUBQ),
    Site("right_belly_lower", "Right of Navel - Lower", "R Belly L", "Belly", R, SUBQ),
    # Love handles
    Site("left_love_handle_upper", "Left Love Handle - Upper", "L Handle U", "Love Handles", L, SUBQ),
    Site("left_love_handle_lower", "Left Love Handle - Lower", "L Handle L", "Love Handles", L, SUBQ),
    Site("right_love_handle_upper", "Right Love Handle - Upper", "R Handle U", "Love Handles", R, SUBQ),
    Site("right_love_handle_lower", "Right Love Handle - Lower", "R Handle L", "Love Handles", R, SUBQ),
    # Glute quadrants
    Site("glute_left_upper", "Left Glute - Upper", "L Glute U", "Glutes", L, SUBQ),
    Site("glute_left_lower", "Left Glute - Lower", "L Glute L", "Glutes", L, SUBQ),
    Site("glute_right_upper", "Right Glute - Upper", "R Glute U", "Glutes", R, SUBQ),
    Site("glute_right_lower", "Right Glute - Lower", "R Glute L", "Glutes", R, SUBQ),
    # Thighs
    Site("thigh_left", "Left Thigh", "L Thigh", "Thighs", L, SUBQ),
    Site("thigh_right", "Right Thigh", "R Thigh", "Thighs", R, SUBQ),
]

CATALOGS: Dict[Modality, List[Site]] = {IM: SITES_IM, SUBQ: SITES_SUBQ}

DEFAULT_SITE_IDS = {
    IM: "glute_left",
    SUBQ: "left_belly_upper",
}

# Picker groupings shown to the user
GROUPS: Dict[Modality, List[Tuple[str, List[str]]]] = {
    IM: [
        ("Glutes", ["glute_left", "glute_right"]),
        ("Delts", ["delt_left", "delt_right"]),
        ("Quads", ["quad_left", "quad_right"]),
        ("Ventrogluteal", ["vg_left", "vg_right"]),
    ],
    SUBQ: [
        ("Belly (Left of Navel)", ["left_belly_upper", "left_belly_lower"]),
        ("Belly (Right of Navel)", ["right_belly_upper", "right_belly_lower"]),
        ("Left Love Handle", ["left_love_handle_upper", "left_love_handle_lower"]),
        ("Right Love Handle", ["right_love_handle_upper", "right_love_handle_lower"]),
        ("Glutes", ["glute_left_upper", "glute_left_lower", "glute_right_upper", "glute_right_lower"]),
        ("Thighs", ["thigh_left", "thigh_right"]),
    ],
}

_INDEX: Dict[Modality, Dict[str, Site]] = {
    modality: {site.id: site for site in sites} for modality, sites in CATALOGS.items()
}

_MIRROR = {
    "left": "right",
    "right": "left",
}


def sites_for(modality: Modality) -> List[Site]:
    return list(CATALOGS[Modality(modality)])


def default_site(modality: Modality) -> Site:
    modality = Modality(modality)
    return _INDEX[modality][DEFAULT_SITE_IDS[modality]]


def get_site(modality: Modality, site_id: str) -> Optional[Site]:
    """Lookup within one catalog. Ids from the other modality are not found."""
    return _INDEX[Modality(modality)].get(site_id)


def body_parts(modality: Modality) -> List[str]:
    parts: List[str] = []
    for site in CATALOGS[Modality(modality)]:
        if site.body_part not in parts:
            parts.append(site.body_part)
    return parts


def grouped_sites(modality: Modality) -> List[Tuple[str, List[Site]]]:
    modality = Modality(modality)
    return [
        (label, [_INDEX[modality][site_id] for site_id in ids])
        for label, ids in GROUPS[modality]
    ]


def opposite_site(site: Site) -> Optional[Site]:
    """Mirror of a site on the other side of the body, same body part and position."""
    if site.laterality == C:
        return None
    parts = site.id.split("_")
    mirrored = "_".join(_MIRROR.get(p, p) for p in parts)
    found = _INDEX[site.modality].get(mirrored)
    if found is None or found.laterality == site.laterality:
        return None
    return found


def modality_for_category(category: str) -> Optional[Modality]:
    try:
        cat = CompoundCategory(category)
    except ValueError:
        return None
    if cat == CompoundCategory.PED:
        return IM
    if cat == CompoundCategory.PEPTIDE:
        return SUBQ
    return None
