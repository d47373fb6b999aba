import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from pairwatch.api.alerts import router as alerts_router
from pairwatch.api.favorites import router as favorites_router
from pairwatch.api.market import router as market_router
from pairwatch.api.settings import router as settings_router
from pairwatch.api.sources import router as sources_router
from pairwatch.container import Container
from pairwatch.exceptions import PersistenceError
from pairwatch.workers.scheduler import PeriodicTask

logger = logging.getLogger("pairwatch.api")

VERSION = "0.1.0"


def build_tasks(container: Container) -> list[PeriodicTask]:
    """Alert evaluation always runs; auto-refresh only when an interval is configured."""
    settings = container.settings()
    tasks = [PeriodicTask("alert-evaluation", settings.alert_interval, container.alert_engine().evaluate)]
    if settings.refresh_interval > 0:
        tasks.append(PeriodicTask("auto-refresh", settings.refresh_interval, container.refresh_service().refresh_selected))
    return tasks


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    app.state.container = container

    store = container.store()
    await store.initialize()
    await container.alert_engine().load()

    tasks = build_tasks(container)
    for task in tasks:
        task.start()
    app.state.tasks = tasks
    yield
    for task in tasks:
        await task.stop()
    await container.fetcher().close()
    await container.probe_fetcher().close()
    await store.dispose()


app = FastAPI(title="Pairwatch", version=VERSION, lifespan=lifespan)


@app.exception_handler(PersistenceError)
async def persistence_exception_handler(request: Request, exc: PersistenceError):
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": f"Storage unavailable: {exc}"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(market_router)
app.include_router(sources_router)
app.include_router(favorites_router)
app.include_router(alerts_router)
app.include_router(settings_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}
