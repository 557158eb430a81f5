# ecolefinder/providers/education_api.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .base import MalformedResponse, UpstreamUnavailable
from .http import JsonHttpProvider

logger = logging.getLogger(__name__)

ANNUAIRE_DATASET = "fr-en-annuaire-education"
GEOLOCALISATION_DATASET = "fr-en-adresse-et-geolocalisation-etablissements-premier-et-second-degre"


@dataclass(frozen=True)
class EducationApiConfig:
    dataset: str = ANNUAIRE_DATASET
    # Field holding the commune name in this dataset, used for refine.<field>=
    commune_field: str = "nom_commune"
    base_url: str = "https://data.education.gouv.fr/api/records/1.0/search/"
    rows: int = 100

    timeout_s: float = 15.0
    max_retries: int = 1
    base_backoff_s: float = 0.4


def annuaire_config(**overrides) -> EducationApiConfig:
    return EducationApiConfig(dataset=ANNUAIRE_DATASET, commune_field="nom_commune", **overrides)


def geolocalisation_config(**overrides) -> EducationApiConfig:
    return EducationApiConfig(dataset=GEOLOCALISATION_DATASET, commune_field="commune", **overrides)


class EducationDatasetProvider(JsonHttpProvider):
    """
    One dataset of the national education open-data portal (OpenDataSoft records API v1):
      - GET https://data.education.gouv.fr/api/records/1.0/search/?dataset=...&refine.<f>=...&rows=100

    Each record comes back as {"recordid": ..., "fields": {...}, ...}.
    """

    def __init__(self, cfg: Optional[EducationApiConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.cfg = cfg or annuaire_config()
        self.provider_name = self.cfg.dataset
        super().__init__(
            timeout_s=self.cfg.timeout_s,
            max_retries=self.cfg.max_retries,
            base_backoff_s=self.cfg.base_backoff_s,
            client=client,
        )

    def _params(
        self,
        commune: str,
        postal_code: Optional[str],
        department: Optional[str],
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "dataset": self.cfg.dataset,
            f"refine.{self.cfg.commune_field}": commune,
        }
        if postal_code is not None:
            params["refine.code_postal"] = postal_code
        if department is not None:
            params["refine.code_departement"] = department
        params["rows"] = self.cfg.rows
        return params

    async def search(
        self,
        commune: str,
        *,
        postal_code: Optional[str] = None,
        department: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetches the records of this dataset for a commune.

        Notes:
        - An unreachable portal or a non-success status is an empty contribution, not an error.
        - A successful answer we cannot read raises MalformedResponse.
        """
        params = self._params(commune, postal_code, department)
        try:
            data = await self._get_json(self.cfg.base_url, params)
        except (UpstreamUnavailable, httpx.HTTPError) as e:
            logger.warning("%s: fetch failed for %s (cp=%s, dept=%s): %s",
                           self.provider_name, commune, postal_code, department, e)
            return []

        if not isinstance(data, dict):
            raise MalformedResponse(f"{self.provider_name}: expected a JSON object response")
        records = data.get("records") or []
        if not isinstance(records, list):
            raise MalformedResponse(f"{self.provider_name}: 'records' is not a list")
        logger.debug("%s: %d record(s) for %s (cp=%s, dept=%s)",
                     self.provider_name, len(records), commune, postal_code, department)
        return records
