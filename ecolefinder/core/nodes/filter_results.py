from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from ..fields import fields_of, resolve
from ..status import StatusChannel
from ..workflow_types import SearchContext

logger = logging.getLogger(__name__)


def commune_matches(record_commune: str, expected: str) -> bool:
    got = (record_commune or "").lower()
    want = (expected or "").lower()
    return got == want or want in got or got in want


def validate_search_results(
    records: Iterable[Dict[str, Any]],
    expected_commune: str,
    expected_cps: Iterable[str],
    status: StatusChannel | None = None,
) -> List[Dict[str, Any]]:
    """
    Keep the records located in the expected commune, under one of the accepted postal codes.
    The commune comparison is lenient: equality or containment either way, case-insensitive.
    """
    records = list(records)
    accepted = set(expected_cps)
    valid = []
    for record in records:
        fields = fields_of(record)
        if fields.get("code_postal") not in accepted:
            continue
        if not commune_matches(resolve(fields, "commune", ""), expected_commune):
            continue
        valid.append(record)

    filtered_out = len(records) - len(valid)
    if filtered_out > 0:
        logger.info("%d establishment(s) filtered out (commune/postal code mismatch)", filtered_out)

    if status is not None:
        found_cps = sorted({fields_of(r).get("code_postal") for r in valid})
        if len(found_cps) > 1:
            status.emit(f"✅ {len(valid)} établissement(s) trouvé(s) (CP: {', '.join(found_cps)})", "success")
        else:
            status.emit(f"✅ {len(valid)} établissement(s) trouvé(s)", "success")
    return valid


class FilterResultsNode:
    name = "filter_results"

    async def run(self, ctx: SearchContext) -> SearchContext:
        ctx.results = validate_search_results(ctx.records, ctx.commune.name, ctx.postal_codes, ctx.status)
        return ctx
