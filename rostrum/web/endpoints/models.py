"""Model and provider listing endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from rostrum.models.manager import ModelManager
from rostrum.models.providers import OllamaProvider, ProviderFactory
from rostrum.web.debate_manager import get_model_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/models")
async def get_models(model_manager: ModelManager = Depends(get_model_manager)):
    """Get the models debaters and judges can use."""
    return {"models": await model_manager.get_available_models()}


@router.get("/providers")
async def get_providers(request: Request):
    """Get available model providers and their status."""
    system_config = request.app.state.config.system
    providers = []

    for provider_name in ProviderFactory.get_available_providers():
        provider_info: dict[str, Any] = {
            "name": provider_name,
            "status": "available",
            "active": provider_name == system_config.provider,
        }

        if provider_name == "openrouter":
            api_key_configured = bool(system_config.openrouter.resolve_api_key())
            provider_info["apiKeyConfigured"] = api_key_configured
            if not api_key_configured:
                provider_info["status"] = "requires_api_key"
        elif provider_name == "ollama":
            running = await OllamaProvider(system_config).is_running()
            provider_info["ollamaRunning"] = running
            if not running:
                provider_info["status"] = "offline"

        providers.append(provider_info)

    return {"providers": providers}
