from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from dotenv import load_dotenv

from ecolefinder.core.config import Settings
from ecolefinder.core.orchestrator import SearchOrchestrator
from ecolefinder.providers.education_api import EducationDatasetProvider
from ecolefinder.providers.geo_api import GeoApiCommuneLookup


async def main():
    repo_root = Path(__file__).resolve().parents[2]
    load_dotenv(repo_root / ".env", override=False)

    # Read after .env so its values apply.
    cfg = Settings()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    async with GeoApiCommuneLookup(cfg.geo_api_config()) as communes, \
            EducationDatasetProvider(cfg.annuaire_config()) as annuaire, \
            EducationDatasetProvider(cfg.geolocalisation_config()) as geoloc:
        orchestrator = SearchOrchestrator(communes, [annuaire, geoloc], widen_threshold=cfg.widen_threshold)
        results = await orchestrator.search("Limoges", "87000")

        print(f"{orchestrator.status.current.message} -> {len(results)} result(s)")
        for e in orchestrator.panel.entries:
            print(f"  {e.name} | {e.address} | {e.type} | {e.coords}")


if __name__ == "__main__":
    asyncio.run(main())
