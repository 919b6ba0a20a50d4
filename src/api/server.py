"""FastAPI server over one shared Tracker."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.dose_routes import router as dose_router
from src.api.inventory_routes import router as inventory_router
from src.engine.errors import TrackerError, UnknownMedicationError, UnknownProductError
from src.engine.tracker import Tracker
from src.notifications.low_stock import LogAlerter
from src.persistence.changes import ChangeFeed
from src.persistence.factory import build_store
from src.utils.logger import get_logger

logger = get_logger("adherence.api.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Build the tracker from config when create_app() was not handed one."""
    if getattr(app.state, "tracker", None) is None:
        app.state.tracker = Tracker(build_store(), alerter=LogAlerter(), feed=app.state.feed)
        logger.info("api.lifespan.tracker_created")
    yield
    app.state.tracker.close()


def create_app(tracker: Tracker | None = None, feed: ChangeFeed | None = None) -> FastAPI:
    """
    Create the FastAPI app. A passed tracker is used as is (tests); otherwise the
    lifespan builds one. POST /notifications publishes on `feed`, which the tracker
    built here subscribes to.
    """
    app = FastAPI(title="Medication Adherence", version="0.1.0", lifespan=_lifespan)
    app.state.feed = feed or ChangeFeed()
    app.state.tracker = tracker

    app.include_router(dose_router)
    app.include_router(inventory_router)

    @app.exception_handler(TrackerError)
    async def tracker_error(request: Request, exc: TrackerError) -> JSONResponse:
        status = 404 if isinstance(exc, (UnknownMedicationError, UnknownProductError)) else 400
        logger.info("api.tracker_error", path=request.url.path, status=status, error=str(exc))
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/notifications")
    def notifications(source: str = "http") -> dict[str, object]:
        """Something changed in the shared store: every subscriber reloads its snapshot."""
        delivered = app.state.feed.publish(source)
        return {"status": "reloaded", "listeners": delivered}

    return app
