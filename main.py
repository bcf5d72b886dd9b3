"""
FastAPI应用主入口
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from api.routes import gateways as gateway_routes
from application.ports.gateway_factory import GatewayFactory
from application.services.gateway_registry import build
from core.config import Settings, get_settings
from core.exceptions import register_exception_handlers
from core.logging_config import configure_logging, get_logger
from core.response import success_response
from domain.common.exceptions import GatewayConstructionError, InvalidGatewayConfiguration
from domain.gateway.validator import validate
from infrastructure.external.payments import create_gateway_factory


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    gateway_factory: Optional[GatewayFactory] = None,
) -> FastAPI:
    """
    Create the application.

    Args:
        settings: Settings to use; read from the environment when omitted
        gateway_factory: Factory building gateway instances; defaults to the
            plugin factory configured from ``settings.payments.builders``
    """
    settings = settings or get_settings()
    # 初始化日志：在入口处显式配置，避免模块导入时的副作用
    configure_logging(settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理：校验网关配置并构建注册表"""
        payments = settings.payments
        try:
            spec = validate(payments.to_raw())
        except InvalidGatewayConfiguration as exc:
            # 配置错误对启动是致命的
            logger.error(
                "gateway_config_invalid",
                error_type=exc.error_type,
                error=exc.message,
                details=exc.details,
            )
            raise
        logger.info(
            "gateway_config_validated",
            gateways=spec.names(),
            default_gateway=spec.default_gateway,
            disabled_gateways=sorted(spec.disabled_gateways),
        )

        factory = gateway_factory or create_gateway_factory(payments)
        try:
            registry = build(spec, factory)
        except GatewayConstructionError as exc:
            logger.error("gateway_registry_build_failed", gateway=exc.name, error=exc.message)
            raise
        app.state.gateway_registry = registry

        yield

        app.state.gateway_registry = None
        logger.info("application_shutdown", message="Application shutdown")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    # 注册全局异常处理器
    register_exception_handlers(app)

    # 注册路由
    app.include_router(gateway_routes.router, prefix="/api/v1")
    app.include_router(gateway_routes.default_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """健康检查端点"""
        return success_response(data={"status": "healthy"})

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=8000,
        log_level="debug" if settings.DEBUG else "info",
    )
