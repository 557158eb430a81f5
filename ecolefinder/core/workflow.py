from __future__ import annotations

import logging
from typing import List

from .workflow_types import SearchContext

logger = logging.getLogger(__name__)


class WorkflowRunner:
    def __init__(self, nodes: List):
        self.nodes = nodes

    async def run(self, ctx: SearchContext) -> SearchContext:
        for node in self.nodes:
            ctx = await node.run(ctx)
            if ctx.halted:
                logger.info("search #%d halted after %s: %s", ctx.sequence, node.name, ctx.errors[-1])
                break
        return ctx
