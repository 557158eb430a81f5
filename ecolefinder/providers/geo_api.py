# ecolefinder/providers/geo_api.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from .base import CommuneCandidate, MalformedResponse
from .http import JsonHttpProvider


class _CommuneItem(BaseModel):
    nom: str
    code: Optional[str] = None
    codes_postaux: List[str] = Field(default_factory=list, alias="codesPostaux")


@dataclass(frozen=True)
class GeoApiConfig:
    base_url: str = "https://geo.api.gouv.fr"
    fields: str = "nom,code,codesPostaux"

    timeout_s: float = 10.0
    max_retries: int = 1
    base_backoff_s: float = 0.4


class GeoApiCommuneLookup(JsonHttpProvider):
    """
    French government commune referential:
      - GET https://geo.api.gouv.fr/communes?nom=...&codePostal=...&fields=nom,code,codesPostaux

    Answers with a JSON list, one object per matching commune.
    """

    provider_name = "geo_api"

    def __init__(self, cfg: Optional[GeoApiConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.cfg = cfg or GeoApiConfig()
        super().__init__(
            timeout_s=self.cfg.timeout_s,
            max_retries=self.cfg.max_retries,
            base_backoff_s=self.cfg.base_backoff_s,
            client=client,
        )

    async def lookup(self, name: str, postal_code: str) -> List[CommuneCandidate]:
        data = await self._get_json(
            f"{self.cfg.base_url}/communes",
            {"nom": name, "codePostal": postal_code, "fields": self.cfg.fields},
        )
        if not isinstance(data, list):
            raise MalformedResponse("geo_api: expected a JSON list of communes")
        try:
            items = [_CommuneItem.model_validate(d) for d in data]
        except ValidationError as e:
            raise MalformedResponse(f"geo_api: unexpected commune payload: {e}") from e
        return [CommuneCandidate(name=i.nom, code=i.code, postal_codes=list(i.codes_postaux)) for i in items]
