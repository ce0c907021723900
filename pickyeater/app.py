from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .analytics.aggregator import compute_analytics
from .matching.errors import InvalidArgument
from .matching.models import MatchRequest, MatchResponse, Preferences, UserMatchRequest
from .service import MatchService, build_service

app = FastAPI(title="PickyEater Matching API", version="1.0.0")

_service = build_service()


def get_service() -> MatchService:
    return _service


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/match", response_model=MatchResponse)
def match(
    body: MatchRequest,
    service: MatchService = Depends(get_service),
) -> MatchResponse:
    return service.match(body.businesses, body.preferences, body.page, body.page_size)


# ── User endpoints ───────────────────────────────────────────────────────


@app.get("/users/{user_id}/preferences", response_model=Preferences)
def get_preferences(
    user_id: str,
    service: MatchService = Depends(get_service),
) -> Preferences:
    preferences = service.get_preferences(user_id)
    if preferences is None:
        raise HTTPException(status_code=404, detail="No preferences saved for this user")
    return preferences


@app.put("/users/{user_id}/preferences", response_model=Preferences)
def put_preferences(
    user_id: str,
    body: Preferences,
    service: MatchService = Depends(get_service),
) -> Preferences:
    return service.update_preferences(user_id, body)


@app.delete("/users/{user_id}/preferences")
def delete_preferences(
    user_id: str,
    service: MatchService = Depends(get_service),
) -> dict:
    if not service.delete_preferences(user_id):
        raise HTTPException(status_code=404, detail="No preferences saved for this user")
    return {"status": "deleted"}


@app.post("/users/{user_id}/matches", response_model=MatchResponse)
def user_matches(
    user_id: str,
    body: UserMatchRequest,
    service: MatchService = Depends(get_service),
) -> MatchResponse:
    return service.match_for_user(
        user_id,
        body.location,
        businesses=body.businesses,
        page=body.page,
        page_size=body.page_size,
    )


# ── Operator endpoints ───────────────────────────────────────────────────


@app.get("/users")
def list_users(service: MatchService = Depends(get_service)) -> dict:
    return {"user_ids": service.list_users()}


@app.get("/cache/stats")
def cache_stats(service: MatchService = Depends(get_service)) -> dict:
    return service.cache.stats()


@app.get("/analytics")
def analytics(service: MatchService = Depends(get_service)) -> dict:
    return compute_analytics(service.events.get_events())
