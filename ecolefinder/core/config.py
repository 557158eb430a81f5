from pydantic import BaseModel, Field
import os

from ..providers.education_api import EducationApiConfig, annuaire_config, geolocalisation_config
from ..providers.geo_api import GeoApiConfig


def _env(name: str, default: str):
    return Field(default_factory=lambda: os.getenv(name, default), validate_default=True)


class Settings(BaseModel):
    # Environment is read at instantiation, so Settings() after load_dotenv() sees .env values.
    geo_api_url: str = _env("ECOLEFINDER_GEO_API_URL", "https://geo.api.gouv.fr")
    education_api_url: str = _env(
        "ECOLEFINDER_EDUCATION_API_URL", "https://data.education.gouv.fr/api/records/1.0/search/"
    )
    rows: int = _env("ECOLEFINDER_ROWS", "100")
    widen_threshold: int = _env("ECOLEFINDER_WIDEN_THRESHOLD", "10")
    timeout_s: float = _env("ECOLEFINDER_TIMEOUT_S", "15")
    max_retries: int = _env("ECOLEFINDER_MAX_RETRIES", "1")
    log_level: str = _env("ECOLEFINDER_LOG_LEVEL", "INFO")

    def geo_api_config(self) -> GeoApiConfig:
        return GeoApiConfig(base_url=self.geo_api_url, timeout_s=self.timeout_s, max_retries=self.max_retries)

    def annuaire_config(self) -> EducationApiConfig:
        return annuaire_config(
            base_url=self.education_api_url, rows=self.rows,
            timeout_s=self.timeout_s, max_retries=self.max_retries,
        )

    def geolocalisation_config(self) -> EducationApiConfig:
        return geolocalisation_config(
            base_url=self.education_api_url, rows=self.rows,
            timeout_s=self.timeout_s, max_retries=self.max_retries,
        )


settings = Settings()
