import asyncio
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.networks import SUPPORTED_NETWORKS
from ..services.operations import ServiceFactory, get_service_factory

router = APIRouter()


@router.get("/healthz")
async def health_check(service_factory: ServiceFactory = Depends(get_service_factory)) -> Dict[str, Any]:
    """Health check endpoint that verifies each network's RPC"""

    checks = await asyncio.gather(*(service_factory(name).health() for name in SUPPORTED_NETWORKS))
    network_status = dict(zip(SUPPORTED_NETWORKS, checks))

    available_networks = sum(1 for status in network_status.values() if status["status"] == "healthy")

    return {
        "status": "healthy" if available_networks == len(network_status) else "degraded",
        "networks": network_status,
        "available_networks": available_networks,
        "total_networks": len(network_status),
    }
