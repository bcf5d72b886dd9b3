"""
自定义异常映射与全局异常处理器
"""
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status as http_status

from .response import error_response
from shared.codes import BusinessCode
from shared.codes.gateway_codes import CONFIGURATION_CODES, GatewayCode
from core.logging_config import get_logger
from domain.common.exceptions import BusinessException


def business_code_to_http_status(code: int) -> int:
    """根据业务码映射HTTP状态码（默认400）。"""
    if code in CONFIGURATION_CODES:
        return http_status.HTTP_500_INTERNAL_SERVER_ERROR
    mapping = {
        GatewayCode.GATEWAY_NO_DEFAULT: http_status.HTTP_400_BAD_REQUEST,
        GatewayCode.GATEWAY_DISABLED: http_status.HTTP_403_FORBIDDEN,
        GatewayCode.GATEWAY_NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
        GatewayCode.GATEWAY_CONSTRUCTION_FAILED: http_status.HTTP_503_SERVICE_UNAVAILABLE,
        GatewayCode.GATEWAY_UNSUPPORTED: http_status.HTTP_503_SERVICE_UNAVAILABLE,

        BusinessCode.PARAM_ERROR: http_status.HTTP_400_BAD_REQUEST,
        BusinessCode.BUSINESS_ERROR: http_status.HTTP_400_BAD_REQUEST,
        BusinessCode.NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
        BusinessCode.FORBIDDEN: http_status.HTTP_403_FORBIDDEN,
        BusinessCode.SYSTEM_ERROR: http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        BusinessCode.SERVICE_UNAVAILABLE: http_status.HTTP_503_SERVICE_UNAVAILABLE,
    }
    return mapping.get(code, http_status.HTTP_400_BAD_REQUEST)


def register_exception_handlers(app: FastAPI):
    """
    注册全局异常处理器

    Args:
        app: FastAPI应用实例
    """

    logger = get_logger(__name__)

    @app.exception_handler(BusinessException)
    async def business_exception_handler(request: Request, exc: BusinessException):
        """处理业务异常"""
        status_code = business_code_to_http_status(exc.code)
        if status_code >= 500:
            logger.error(
                "business_exception",
                path=request.url.path,
                code=int(exc.code),
                error_type=exc.error_type,
                error=exc.message,
            )
        response = error_response(
            code=exc.code,
            message=exc.message,
            error_type=exc.error_type,
            details=exc.details,
            field=exc.field,
        )
        return JSONResponse(status_code=status_code, content=response.model_dump(mode='json'))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """处理所有未捕获的异常"""
        # 在开发环境可以返回详细错误信息
        details = None
        if app.debug:
            details = {
                "exception": str(exc),
                "traceback": traceback.format_exc()
            }

        response = error_response(
            code=BusinessCode.SYSTEM_ERROR,
            message="Internal server error",
            error_type="SystemError",
            details=details,
        )

        logger.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True,
        )

        return JSONResponse(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=response.model_dump(mode='json')
        )
