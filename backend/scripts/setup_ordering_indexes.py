"""Create MongoDB indexes for the ordering collections.

Collections:
- menu_offerings: (menu_id, recipe_name) for menu listings
- orders: (account_id, ordered_at desc) for order history

Usage:
    python scripts/setup_ordering_indexes.py

Environment Variables:
    MONGODB_URI: MongoDB connection string (required)
    MONGODB_DATABASE: Database name (default: mealprep)
"""

import asyncio
import sys
from pathlib import Path

import structlog
from dotenv import load_dotenv

from infrastructure.config import get_mongodb_database
from infrastructure.log_config import configure_logging
from infrastructure.persistence.mongodb.offering_store import MongoOfferingStore
from infrastructure.persistence.mongodb.order_repository import MongoOrderRepository

logger = structlog.get_logger(__name__)


async def main() -> int:
    offerings = MongoOfferingStore()
    orders = MongoOrderRepository()
    try:
        await offerings.ensure_indexes()
        logger.info("indexes_created", collection=offerings.collection_name)
        await orders.ensure_indexes()
        logger.info("indexes_created", collection=orders.collection_name)
    except Exception as e:
        logger.error("index_setup_failed", database=get_mongodb_database(), error=str(e))
        return 1
    finally:
        await offerings.close()
        await orders.close()
    return 0


if __name__ == "__main__":
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    configure_logging()
    sys.exit(asyncio.run(main()))
