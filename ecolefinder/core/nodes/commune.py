from __future__ import annotations

import logging

import httpx

from ...providers.base import CommuneLookup, CommuneReference, MalformedResponse, UpstreamUnavailable
from ..workflow_types import SearchContext

logger = logging.getLogger(__name__)


class ValidateCommuneNode:
    """
    Resolves the typed commune name to its official name.

    No match stops the search. Several matches keep the first one and expose the
    others. An unreachable referential falls back to the name as typed.
    """

    name = "validate_commune"

    def __init__(self, lookup: CommuneLookup):
        self.lookup = lookup

    async def run(self, ctx: SearchContext) -> SearchContext:
        ctx.status.emit("🔍 Validation de la commune...")
        try:
            candidates = await self.lookup.lookup(ctx.commune_input, ctx.postal_code)
        except (UpstreamUnavailable, MalformedResponse, httpx.HTTPError) as e:
            logger.warning("commune validation unavailable for %r (%s): %s", ctx.commune_input, ctx.postal_code, e)
            ctx.status.emit("⚠️ Impossible de valider la commune, recherche directe", "error")
            ctx.commune = CommuneReference(name=ctx.commune_input, code=None, status="degraded")
            return ctx

        if not candidates:
            ctx.status.emit("⚠️ Commune non trouvée pour ce code postal", "error")
            ctx.halt(f"commune not found: {ctx.commune_input} ({ctx.postal_code})")
            return ctx

        first, others = candidates[0], candidates[1:]
        if others:
            logger.warning(
                "%d communes match %r (%s), keeping %s; alternatives: %s",
                len(candidates), ctx.commune_input, ctx.postal_code, first.name,
                ", ".join(f"{c.name} ({c.code})" for c in others),
            )
            ctx.status.emit(f"⚠️ {len(candidates)} communes trouvées avec ce nom/code postal", "error")
            ctx.commune = CommuneReference(
                name=first.name,
                code=first.code,
                postal_codes=list(first.postal_codes),
                status="ambiguous",
                alternatives=list(others),
            )
            return ctx

        ctx.commune = CommuneReference(name=first.name, code=first.code, postal_codes=list(first.postal_codes))
        ctx.status.emit(f"✅ Commune validée: {first.name} ({ctx.postal_code})", "success")
        return ctx
