from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from infrastructure.database.database import SessionLocal
from infrastructure.document_store import DocumentStoreBackend, create_document_store
from services.catalog import DishCatalogService

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")


async def _reindex(dish_id: Optional[str]) -> None:
    async with SessionLocal() as session:
        store = create_document_store(session, backend=DocumentStoreBackend.SQL)
        catalog = DishCatalogService(store)
        if dish_id:
            tokens = await catalog.reindex_dish(dish_id)
            logger.info("Dish %s reindexed with %d tokens", dish_id, len(tokens))
        else:
            count = await catalog.reindex_all()
            logger.info("Reindexed %d dishes", count)
        await session.commit()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Rewrite the search tokens of stored dishes from their current names."
    )
    parser.add_argument("--dish-id", help="Only reindex this dish", default=None)
    args = parser.parse_args()
    asyncio.run(_reindex(args.dish_id))


if __name__ == "__main__":
    main()
