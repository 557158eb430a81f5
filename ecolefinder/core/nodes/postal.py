from __future__ import annotations

import logging
import re
from typing import List

from ..workflow_types import SearchContext

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def related_postal_codes(cp: str) -> List[str]:
    """
    The postal code followed by its postal-box variants: same 3-digit prefix, then 0 + 1..9.
    87200 -> 87201 ... 87209. This is a numeric heuristic: the input shape is not checked.
    The prefix is read up to its first non-digit (87a12 -> 8701 ...), and a prefix with a
    leading zero loses it (010xx -> 1001 ...). A prefix with no leading digit yields no variant.
    """
    codes = [cp]
    m = _LEADING_INT.match(cp[:3])
    if m is None:
        return codes
    base = int(m.group(1))
    for i in range(1, 10):
        variant = f"{base}0{i}"
        if variant != cp and variant not in codes:
            codes.append(variant)
    return codes


class PostalVariantsNode:
    name = "postal_variants"

    async def run(self, ctx: SearchContext) -> SearchContext:
        ctx.postal_codes = related_postal_codes(ctx.postal_code)
        logger.info("search #%d: postal codes %s", ctx.sequence, ", ".join(ctx.postal_codes))
        return ctx
