import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from ..core.chat import ChatService
from ..core.store import KeyValueStore, get_store
from ..providers.aura import AuraClient, get_aura_client
from ..providers.llm import LLMProvider, LLMProviderError, get_llm_provider
from ..services.operations import ServiceFactory, get_service_factory
from ..types.requests import ChatRequest
from .responses import error_response, success, validation_error

router = APIRouter()
logger = logging.getLogger(__name__)

ProviderFactory = Callable[[], LLMProvider]


def get_provider_factory() -> ProviderFactory:
    return get_llm_provider


@router.post("/chat")
async def chat_endpoint(
    payload: Dict[str, Any] = Body(...),
    provider_factory: ProviderFactory = Depends(get_provider_factory),
    aura: AuraClient = Depends(get_aura_client),
    service_factory: ServiceFactory = Depends(get_service_factory),
    store: KeyValueStore = Depends(get_store),
):
    """Chat endpoint for conversational portfolio and transaction help"""

    try:
        request = ChatRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)

    try:
        chat_service = ChatService(provider_factory(), aura, service_factory, store)
        data = await chat_service.respond(request)
    except (ValueError, LLMProviderError) as exc:
        logger.error("Chat processing failed: %s", exc)
        return error_response(500, "Failed to process chat request", message=str(exc))

    return success(data)
