# scripts/init_db.py
import asyncio
import logging

from leadmatch.config import settings
from leadmatch.db import engine
from leadmatch.logs import quiet_logging
from leadmatch.models import Base


async def main() -> None:
    quiet_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logging.getLogger("leadmatch.init_db").info("created all tables (idempotent) in %s", settings.LEADMATCH_DB_URL)


if __name__ == "__main__":
    asyncio.run(main())
