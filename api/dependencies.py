"""
API依赖项 - 支付网关注入
"""
from typing import Any, Callable, Optional

from fastapi import Depends, Request

from application.services.gateway_registry import GatewayRegistry


async def get_gateway_registry(request: Request) -> GatewayRegistry:
    """获取应用启动时构建的网关注册表"""
    registry = getattr(request.app.state, "gateway_registry", None)
    if registry is None:
        raise RuntimeError(
            "Gateway registry not initialized. "
            "Build it in the application lifespan before serving requests."
        )
    return registry


def gateway_provider(name: Optional[str] = None) -> Callable[..., Any]:
    """Dependency resolving one gateway, the default gateway when ``name`` is None.

    Usage::

        @router.post("/checkout")
        def checkout(gateway = Depends(gateway_provider("Stripe"))):
            ...
    """

    # Must stay sync: the first lookup may construct the gateway.
    def _get_gateway(registry: GatewayRegistry = Depends(get_gateway_registry)) -> Any:
        return registry.get(name)

    return _get_gateway
