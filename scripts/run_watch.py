"""Headless watcher: pick a source, keep its snapshot fresh and print triggered alerts.

Usage:
    PYTHONPATH=src python scripts/run_watch.py [SOURCE_ID]
"""

import asyncio
import logging
import sys

from pairwatch.config import settings

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

DEFAULT_REFRESH_INTERVAL = 60.0


async def main(source_id: str | None) -> None:
    from pairwatch.container import Container
    from pairwatch.exceptions import IngestionError
    from pairwatch.workers.scheduler import PeriodicTask

    container = Container()
    settings = container.settings()
    store = container.store()
    mode = await store.initialize()
    print(f"Database: {settings.db_path}  (favorites schema: {mode.value})")

    engine = container.alert_engine()
    print(f"Enabled alerts: {await engine.load()}")

    if source_id is None:
        default = await container.catalog().find_default_source()
        if default is None:
            print("No well-known exchange is reachable right now.")
            return
        source_id = default.id
        print(f"Using default exchange {default.name} ({default.id})")

    service = container.refresh_service()
    try:
        snapshot = await service.refresh(source_id)
    except IngestionError as exc:
        print(f"Could not load exchange {source_id}: {exc}")
        return
    print(f"{snapshot.describe_source()}  pairs: {len(snapshot.pairs)}")

    interval = settings.refresh_interval or DEFAULT_REFRESH_INTERVAL
    tasks = [
        PeriodicTask("alert-evaluation", settings.alert_interval, engine.evaluate),
        PeriodicTask("auto-refresh", interval, service.refresh_selected),
    ]
    for task in tasks:
        task.start()

    try:
        async for event in container.bus().subscribe():
            print(event.describe())
    finally:
        for task in tasks:
            await task.stop()
        await container.fetcher().close()
        await container.probe_fetcher().close()
        await store.dispose()


if __name__ == "__main__":
    try:
        asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
    except KeyboardInterrupt:
        pass
