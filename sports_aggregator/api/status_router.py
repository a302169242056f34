"""Status API router - provider health registry introspection."""

from fastapi import APIRouter, Depends, HTTPException

from ..container import ServiceContainer
from ..core.health_registry import ProviderHealthRegistry
from .dependencies import get_container, get_registry


router = APIRouter()


@router.get("")
async def get_provider_statuses(registry: ProviderHealthRegistry = Depends(get_registry)):
    """Health and rate-limit state of every registered provider."""
    return {"providers": [status.to_dict() for status in registry.get_all_statuses()]}


@router.post("/reset/{provider_name}")
async def reset_provider(provider_name: str, registry: ProviderHealthRegistry = Depends(get_registry)):
    """Manually mark a provider healthy again."""
    if not registry.reset(provider_name):
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider_name}")
    return {
        "message": f"Provider {provider_name} reset",
        "provider": registry.get_status(provider_name).to_dict(),
    }


@router.get("/cache")
async def get_cache_stats(container: ServiceContainer = Depends(get_container)):
    return {
        "news": container.news.cache_stats(),
        "scores": container.scores.cache_stats(),
    }
