"""Scores API router - live scores and daily scoreboards."""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import Settings
from ..models import SportId
from ..services.scores_aggregator import ScoresAggregator
from .dependencies import clamp_limit, get_scores_aggregator, get_settings_dep, parse_sport, sport_label


router = APIRouter()


def _parse_day(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date. Expected format YYYY-MM-DD")


@router.get("")
async def get_scores(
    sport: Optional[SportId] = Depends(parse_sport),
    limit: Optional[int] = Query(default=None),
    refresh: bool = Query(default=False),
    scores: ScoresAggregator = Depends(get_scores_aggregator),
    settings: Settings = Depends(get_settings_dep),
):
    """Live scores across providers, latest start first."""
    limit = clamp_limit(limit, settings.max_limit, settings.max_limit)
    result = await scores.get_latest(sport, limit=limit, use_cache=not refresh)
    return {
        "scores": [score.to_dict() for score in result.items],
        "totalResults": len(result.items),
        "sport": sport_label(sport),
        "lastUpdated": result.last_updated.isoformat(),
    }


@router.get("/scoreboard")
async def get_scoreboard(
    sport: Optional[SportId] = Depends(parse_sport),
    date: Optional[str] = Query(default=None),
    scores: ScoresAggregator = Depends(get_scores_aggregator),
    settings: Settings = Depends(get_settings_dep),
):
    """Scores of games starting on ``date`` (YYYY-MM-DD, UTC)."""
    day = _parse_day(date)
    scoreboard = await scores.get_scoreboard(sport, day, limit=settings.max_limit)
    return {
        "date": scoreboard.date.isoformat(),
        "scores": [score.to_dict() for score in scoreboard.scores],
    }


@router.post("/clear-cache")
async def clear_scores_cache(scores: ScoresAggregator = Depends(get_scores_aggregator)):
    cleared = scores.clear_cache()
    return {"message": "Scores cache cleared", "cleared": cleared}
