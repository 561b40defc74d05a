from __future__ import annotations

import asyncio
import logging

from leadmatch.jobs.scheduler import build_scheduler
from leadmatch.logs import quiet_logging

log = logging.getLogger("leadmatch.scheduler")


async def main() -> None:
    quiet_logging()

    scheduler = build_scheduler()
    scheduler.start()
    log.info("Scheduler started")

    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        scheduler.shutdown(wait=False)
        log.info("Scheduler stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
