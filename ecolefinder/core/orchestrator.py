from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..providers.base import CommuneLookup, EstablishmentDataset
from ..ui.panel import ResultsPanel
from .config import settings
from .nodes.commune import ValidateCommuneNode
from .nodes.discover import DiscoverEstablishmentsNode
from .nodes.filter_results import FilterResultsNode
from .nodes.postal import PostalVariantsNode
from .nodes.widen import WidenSearchNode
from .status import StatusChannel
from .workflow import WorkflowRunner
from .workflow_types import SearchContext, SearchInputError

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """
    Runs one establishment search end to end and hands the result to the panel.

    Searches are numbered; a search that finishes after a newer one has started
    is dropped instead of rendered, since in-flight requests cannot be cancelled.
    """

    def __init__(
        self,
        communes: CommuneLookup,
        datasets: Sequence[EstablishmentDataset],
        panel: Optional[ResultsPanel] = None,
        status: Optional[StatusChannel] = None,
        widen_threshold: Optional[int] = None,
    ):
        if not datasets:
            raise ValueError("at least one establishment dataset is required")
        self.status = status or StatusChannel()
        self.panel = panel or ResultsPanel(self.status)
        threshold = settings.widen_threshold if widen_threshold is None else widen_threshold
        self.runner = WorkflowRunner(
            nodes=[
                ValidateCommuneNode(communes),
                PostalVariantsNode(),
                DiscoverEstablishmentsNode(datasets),
                # Widening goes to the primary dataset only.
                WidenSearchNode(datasets[0], threshold=threshold),
                FilterResultsNode(),
            ]
        )
        self._sequence = itertools.count(1)
        self.latest = 0

    async def search(self, commune: str, postal_code: str) -> List[Dict[str, Any]]:
        commune = (commune or "").strip()
        postal_code = (postal_code or "").strip()
        if not commune or not postal_code:
            raise SearchInputError("⚠️ Entrez commune et code postal")

        sequence = next(self._sequence)
        self.latest = sequence
        ctx = SearchContext(
            sequence=sequence,
            commune_input=commune,
            postal_code=postal_code,
            status=self.status.for_search(sequence, self.is_latest),
        )
        ctx = await self.run(ctx)
        return ctx.results

    def is_latest(self, sequence: int) -> bool:
        return sequence == self.latest

    async def run(self, ctx: SearchContext) -> SearchContext:
        logger.info("search #%d: %s (%s)", ctx.sequence, ctx.commune_input, ctx.postal_code)
        if self.is_latest(ctx.sequence):
            self.panel.reset()
        try:
            ctx = await self.runner.run(ctx)
            if ctx.halted:
                ctx.results = []
                return ctx

            if not self.is_latest(ctx.sequence):
                logger.info("search #%d superseded by #%d, results discarded", ctx.sequence, self.latest)
                ctx.stale = True
                ctx.results = []
                return ctx

            self.panel.reset()
            self.panel.render(ctx.results, ctx.status)
        except Exception as e:
            logger.exception("search #%d failed", ctx.sequence)
            ctx.failed = True
            ctx.errors.append(str(e))
            ctx.results = []
            if self.is_latest(ctx.sequence):
                self.panel.reset()
                ctx.status.emit("❌ Erreur lors du chargement des données", "error")
        return ctx
