"""Text-search proxy to a third-party custom search API."""

from __future__ import annotations

import logging
from typing import Any

import requests
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, field_validator

from mp3drop.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


class SearchRequest(BaseModel):
    query: str

    @field_validator("query")
    @classmethod
    def _strip_query(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("The search field cannot be empty.")
        return value


def fetch_search_results(settings: Settings, query: str) -> dict[str, Any]:
    response = requests.get(
        settings.search_endpoint,
        params={"key": settings.search_api_key, "cx": settings.search_engine_id, "q": query},
        timeout=settings.search_timeout_seconds,
    )
    response.raise_for_status()
    return response.json()


@router.post("/search")
def search(payload: SearchRequest, request: Request) -> dict[str, Any]:
    """Forward a trimmed query to the configured search API and relay its JSON."""

    settings: Settings = request.app.state.settings
    if len(payload.query) > settings.search_max_query_length:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "invalid_query",
                "message": f"Search may contain at most {settings.search_max_query_length} characters.",
            },
        )
    if not settings.search_configured:
        raise HTTPException(
            status_code=503,
            detail={"code": "search_unconfigured", "message": "Search is not configured."},
        )

    try:
        return fetch_search_results(settings, payload.query)
    except (requests.RequestException, ValueError) as error:
        logger.error("Search API request failed", exc_info=error)
        raise HTTPException(
            status_code=502,
            detail={"code": "search_unavailable", "message": "Error while fetching data."},
        ) from error
