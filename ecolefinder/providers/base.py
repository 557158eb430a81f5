# Provider interfaces, dataclasses and errors.
# ecolefinder/providers/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


class UpstreamUnavailable(RuntimeError):
    """Raised when an upstream service cannot be reached or keeps failing."""


class MalformedResponse(ValueError):
    """Raised when an upstream service answers with a body we cannot read."""


@dataclass(frozen=True)
class CommuneCandidate:
    """One commune returned by the reference lookup."""
    name: str
    code: Optional[str]
    postal_codes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CommuneReference:
    """
    Authoritative commune identity used by the rest of a search.
    `code` is None when the lookup service could not be reached and the
    user's input is trusted as-is.
    """
    name: str
    code: Optional[str]
    postal_codes: List[str] = field(default_factory=list)
    status: str = "validated"
    alternatives: List[CommuneCandidate] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"


class CommuneLookup(Protocol):
    provider_name: str

    async def lookup(self, name: str, postal_code: str) -> List[CommuneCandidate]:
        """
        Returns every commune matching name + postal code (possibly empty).
        Raises UpstreamUnavailable / MalformedResponse when the lookup itself fails.
        """
        ...


class EstablishmentDataset(Protocol):
    provider_name: str

    async def search(
        self,
        commune: str,
        *,
        postal_code: Optional[str] = None,
        department: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Returns raw `{"fields": {...}}` records for a commune, filtered by postal code
        or by department. Unreachable upstream yields []; an unreadable body raises.
        """
        ...
