from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..providers.base import CommuneReference
from .status import SearchStatus, StatusChannel


class SearchInputError(ValueError):
    """Raised when the commune or the postal code is missing."""


@dataclass
class SearchContext:
    sequence: int
    commune_input: str
    postal_code: str
    status: StatusChannel | SearchStatus = field(default_factory=StatusChannel)

    commune: Optional[CommuneReference] = None
    postal_codes: List[str] = field(default_factory=list)
    records: List[Dict[str, Any]] = field(default_factory=list)
    widened: bool = False
    results: List[Dict[str, Any]] = field(default_factory=list)

    halted: bool = False
    stale: bool = False
    failed: bool = False
    errors: List[str] = field(default_factory=list)

    def halt(self, reason: str) -> None:
        self.halted = True
        self.errors.append(reason)
