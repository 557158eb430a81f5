from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, Iterable, List

from ..fields import fields_of, has_location, identity, resolve


def _norm(s: str) -> str:
    decomposed = unicodedata.normalize("NFD", (s or "").lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", "", stripped)


def establishment_key(fields: Dict[str, Any]) -> str:
    """
    Stable identity of an establishment across datasets.
    National id, then UAI, then establishment code; otherwise name + address + postal code.
    """
    ident = identity(fields)
    if ident:
        return ident
    name = _norm(str(resolve(fields, "name", "")))
    address = _norm(str(resolve(fields, "address", "")))
    return f"{name}_{address}_{fields.get('code_postal') or ''}"


def merge_records(existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """Fill the gaps of `existing` with `incoming`; known values are never overwritten."""
    merged = dict(existing)
    merged_fields = dict(fields_of(existing))
    for key, value in fields_of(incoming).items():
        if not merged_fields.get(key) and value:
            merged_fields[key] = value
    merged["fields"] = merged_fields
    return merged


def combine_results(
    records1: Iterable[Dict[str, Any]],
    records2: Iterable[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Deduplicate two batches into one, merging records that share a key.
    Output keeps first-occurrence order and drops records without a location.
    """
    seen: Dict[str, Dict[str, Any]] = {}
    for batch in (records1, records2):
        for record in batch:
            key = establishment_key(fields_of(record))
            if key in seen:
                seen[key] = merge_records(seen[key], record)
            else:
                seen[key] = record
    return [r for r in seen.values() if has_location(fields_of(r))]
