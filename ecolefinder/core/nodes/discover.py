from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ...providers.base import EstablishmentDataset
from ..workflow_types import SearchContext
from .dedupe import combine_results

logger = logging.getLogger(__name__)


class DiscoverEstablishmentsNode:
    name = "discover_establishments"

    def __init__(self, datasets: Sequence[EstablishmentDataset]):
        self.datasets = list(datasets)

    async def run(self, ctx: SearchContext) -> SearchContext:
        ctx.status.emit("🔍 Recherche des établissements...")
        commune = ctx.commune.name

        # Every request of the pass is in flight before any is awaited.
        calls = [
            ds.search(commune, postal_code=cp)
            for cp in ctx.postal_codes
            for ds in self.datasets
        ]
        settled = await asyncio.gather(*calls, return_exceptions=True)

        # Providers turn unreachable upstreams into []; anything left is a real failure.
        for outcome in settled:
            if isinstance(outcome, BaseException):
                raise outcome

        running = []
        width = len(self.datasets)
        for i, cp in enumerate(ctx.postal_codes):
            batch = []
            for records in settled[i * width:(i + 1) * width]:
                batch.extend(records)
            running = combine_results(running, batch)
            logger.debug("search #%d: %d record(s) after cp %s", ctx.sequence, len(running), cp)

        ctx.records = running
        logger.info("search #%d: %d establishment(s) before widening", ctx.sequence, len(running))
        return ctx
