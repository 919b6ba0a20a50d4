"""Request dependencies."""

from fastapi import HTTPException, Request

from src.engine.tracker import Tracker


def get_tracker(request: Request) -> Tracker:
    tracker: Tracker | None = getattr(request.app.state, "tracker", None)
    if tracker is None:
        raise HTTPException(status_code=503, detail="Tracker not initialized")
    return tracker
