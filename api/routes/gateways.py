"""
Gateway API routes.

Read-only view of the gateway registry. Gateway parameters carry credentials
and are never returned.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_gateway_registry
from application.services.gateway_registry import GatewayRegistry
from core.response import success_response


router = APIRouter(prefix="/gateways", tags=["Gateways"])
# Kept outside /gateways so every configured name stays addressable there
default_router = APIRouter(prefix="/default-gateway", tags=["Gateways"])


@router.get("")
async def list_gateways(registry: GatewayRegistry = Depends(get_gateway_registry)):
    """列出可用网关"""
    return success_response(
        data={
            "gateways": registry.list_gateways(),
            "default_gateway": registry.default_gateway_name,
            "disabled_gateways": registry.disabled_gateway_names,
        }
    )


@router.get("/{name}")
def get_gateway(name: str, registry: GatewayRegistry = Depends(get_gateway_registry)):
    return success_response(data=registry.describe(name))


@default_router.get("")
def get_default_gateway(registry: GatewayRegistry = Depends(get_gateway_registry)):
    return success_response(data=registry.describe())
