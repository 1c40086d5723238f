"""FastAPI server exposing wardrobe, recommendation and ranking endpoints."""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import Field, ValidationError

from lookbook_app.app import LookbookApp
from lookbook_app.logging_config import get_logger
from logic.errors import DuplicateWardrobeItemError, EmptyWardrobeError, WardrobeItemNotFoundError
from logic.validation import (
    RecommendationRequest,
    ViralPredictionRequest,
    WardrobeItemInput,
    WardrobeItemUpdate,
    WearEventInput,
    validation_failure,
)
from logic.viral_prediction import predict_viral_potential
from models.wardrobe_item import WardrobeItem

LOGGER = get_logger(__name__)


class RecommendationBody(RecommendationRequest):
    """POST payload: criteria plus the wardrobe owner."""

    user_id: str = Field(min_length=1)


def create_app(lookbook_app: Optional[LookbookApp] = None) -> FastAPI:
    """Build the FastAPI application around a (possibly injected) LookbookApp."""

    lookbook = lookbook_app or LookbookApp()
    app = FastAPI(title="Lookbook", version="0.1.0")
    app.state.lookbook = lookbook

    @app.exception_handler(EmptyWardrobeError)
    async def _empty_wardrobe(_: Request, exc: EmptyWardrobeError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(WardrobeItemNotFoundError)
    async def _item_not_found(_: Request, exc: WardrobeItemNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(DuplicateWardrobeItemError)
    async def _duplicate_item(_: Request, exc: DuplicateWardrobeItemError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"error": str(exc)})

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "lookbook",
            "environment": lookbook.config.environment or "local",
            "gemini_enabled": lookbook.styling_assistant.enabled,
        }

    @app.post("/wardrobe/{user_id}/items", status_code=201)
    def add_item(user_id: str, payload: WardrobeItemInput) -> dict:
        try:
            item = WardrobeItem(
                item_id=payload.item_id or uuid.uuid4().hex,
                user_id=user_id,
                **payload.model_dump(exclude={"item_id"}),
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return lookbook.store.create_item(item).to_dict()

    @app.get("/wardrobe/{user_id}/items")
    def list_items(user_id: str) -> dict:
        items = lookbook.store.list_items_for_user(user_id)
        return {"items": [item.to_dict() for item in items], "count": len(items)}

    @app.patch("/wardrobe/{user_id}/items/{item_id}")
    def edit_item(user_id: str, item_id: str, payload: WardrobeItemUpdate) -> dict:
        try:
            updated = lookbook.store.update_item(user_id, item_id, payload.model_dump(exclude_unset=True))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if updated is None:
            raise WardrobeItemNotFoundError(user_id, item_id)
        return updated.to_dict()

    @app.delete("/wardrobe/{user_id}/items/{item_id}")
    def delete_item(user_id: str, item_id: str) -> dict:
        if not lookbook.store.delete_item(user_id, item_id):
            raise HTTPException(status_code=404, detail=f"Wardrobe item '{item_id}' not found")
        return {"deleted": True, "item_id": item_id}

    @app.post("/wardrobe/{user_id}/items/{item_id}/wear")
    def record_wear(user_id: str, item_id: str, payload: Optional[WearEventInput] = None) -> dict:
        worn_at = payload.worn_at if payload else None
        return lookbook.store.record_wear(user_id, item_id, worn_at).to_dict()

    @app.get("/wardrobe/{user_id}/ranking")
    def wardrobe_ranking(user_id: str) -> dict:
        ranking = lookbook.ranking_agent.wardrobe_ranking(user_id)
        if ranking is None:
            raise HTTPException(status_code=404, detail="Wardrobe has not been created yet")
        return ranking

    @app.get("/outfits/recommendations")
    def get_recommendations(
        user_id: str = Query(..., min_length=1),
        occasion: Optional[str] = None,
        season: Optional[str] = None,
        weather_based: bool = False,
        location: Optional[str] = None,
        style_preference: Optional[str] = None,
        color_scheme: Optional[str] = None,
        limit: Optional[int] = None,
    ):
        try:
            criteria_request = RecommendationRequest.model_validate(
                {
                    "occasion": occasion,
                    "season": season,
                    "style_preference": style_preference,
                    "color_scheme": color_scheme,
                    "limit": limit,
                }
            )
        except ValidationError as exc:
            return JSONResponse(status_code=422, content=validation_failure("Invalid recommendation criteria", exc))

        return lookbook.outfit_stylist.recommend_outfits(
            user_id=user_id,
            criteria=criteria_request.to_criteria(),
            limit=criteria_request.limit,
            weather_based=weather_based,
            location=location,
        )

    @app.post("/outfits/recommendations")
    def post_recommendations(payload: RecommendationBody) -> dict:
        return lookbook.outfit_stylist.recommend_outfits(
            user_id=payload.user_id,
            criteria=payload.to_criteria(),
            limit=payload.limit,
            log_request=True,
        )

    @app.post("/admin/update-rankings")
    def update_rankings() -> dict:
        return lookbook.ranking_agent.update_rankings()

    @app.get("/admin/update-rankings")
    def ranking_stats() -> dict:
        return {"success": True, "stats": lookbook.ranking_agent.stats()}

    @app.post("/looks/viral-prediction")
    def viral_prediction(payload: ViralPredictionRequest) -> dict:
        return {"look_id": payload.look_id, **predict_viral_potential(payload.to_signals())}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:create_app", factory=True, host="0.0.0.0", port=8080, reload=False)
