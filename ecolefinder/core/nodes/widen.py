from __future__ import annotations

import logging

from ...providers.base import EstablishmentDataset
from ..workflow_types import SearchContext
from .dedupe import combine_results

logger = logging.getLogger(__name__)


class WidenSearchNode:
    """
    When the postal-code pass found too little, ask the primary dataset for the
    whole department (still refined on the commune name) and add what it finds.
    Best effort: a failure here leaves the narrower results untouched.
    """

    name = "widen_search"

    def __init__(self, dataset: EstablishmentDataset, threshold: int = 10):
        self.dataset = dataset
        self.threshold = threshold

    async def run(self, ctx: SearchContext) -> SearchContext:
        if len(ctx.records) >= self.threshold:
            return ctx

        ctx.status.emit("🔍 Recherche élargie en cours...")
        department = ctx.postal_code[:2]
        try:
            extra = await self.dataset.search(ctx.commune.name, department=department)
            ctx.records = combine_results(ctx.records, extra)
            ctx.widened = True
        except Exception as e:
            logger.warning("search #%d: widened search failed (dept %s): %s", ctx.sequence, department, e)
            return ctx

        logger.info("search #%d: %d establishment(s) after widening", ctx.sequence, len(ctx.records))
        return ctx
