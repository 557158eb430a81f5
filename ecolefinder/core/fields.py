"""
Where each logical attribute of an establishment lives in the upstream datasets.

The annuaire and geolocation datasets name the same things differently; every
consumer (dedupe, result filtering, the panel) resolves attributes through
this one table instead of chaining fallbacks inline.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

FIELD_TABLE: Dict[str, Tuple[str, ...]] = {
    "name": ("nom_etablissement", "appellation_officielle", "nom_uai"),
    "address": ("adresse_1", "adresse", "adresse_uai"),
    "postal_code": ("code_postal",),
    "commune": ("nom_commune", "commune", "libelle_commune"),
    "type": ("type_etablissement", "nature_uai_libe", "type_uai"),
}

# Identity fields, most authoritative first.
IDENTITY_FIELDS: Tuple[str, ...] = ("identifiant_de_l_etablissement", "numero_uai", "code_etablissement")

# [lat, lon] pair fields, in lookup order; the scalar pair is the last resort.
POSITION_FIELDS: Tuple[str, ...] = ("position", "coordonnees")
LAT_LON_FIELDS: Tuple[str, str] = ("latitude", "longitude")


def fields_of(record: Dict[str, Any]) -> Dict[str, Any]:
    return record.get("fields") or {}


def resolve(fields: Dict[str, Any], attribute: str, default: Any = None) -> Any:
    """First non-empty value among the source fields of `attribute`."""
    for name in FIELD_TABLE[attribute]:
        value = fields.get(name)
        if value:
            return value
    return default


def identity(fields: Dict[str, Any]) -> Optional[str]:
    for name in IDENTITY_FIELDS:
        value = fields.get(name)
        if value:
            return str(value)
    return None


def _coords(lat: Any, lon: Any) -> Optional[Tuple[float, float]]:
    try:
        return float(lat), float(lon)
    except (TypeError, ValueError):
        return None


def location(fields: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """
    (lat, lon) from the first usable representation, or None.
    A pair field counts only when it holds two numeric items.
    """
    for name in POSITION_FIELDS:
        pair = fields.get(name)
        if isinstance(pair, (list, tuple)) and len(pair) >= 2:
            coords = _coords(pair[0], pair[1])
            if coords is not None:
                return coords
    lat_name, lon_name = LAT_LON_FIELDS
    if fields.get(lat_name) and fields.get(lon_name):
        return _coords(fields[lat_name], fields[lon_name])
    return None


def has_location(fields: Dict[str, Any]) -> bool:
    return location(fields) is not None
