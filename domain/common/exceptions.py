"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional, Sequence

from shared.codes.gateway_codes import GatewayCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Configuration errors (raised while validating, before any registry exists)
# ---------------------------------------------------------------------------


class InvalidGatewayConfiguration(BusinessException):
    """Base class for configuration errors; fatal to startup."""

    def __init__(
        self,
        message: str,
        *,
        code: int = GatewayCode.GATEWAY_CONFIG_INVALID,
        error_type: str = "InvalidGatewayConfiguration",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            error_type=error_type,
            details=details,
            field=field,
        )


class InvalidGatewayName(InvalidGatewayConfiguration):
    def __init__(self, name: object):
        super().__init__(
            f"Gateway name must be a non-empty string, got {name!r}",
            code=GatewayCode.GATEWAY_NAME_INVALID,
            error_type="InvalidGatewayName",
            details={"gateway": name if isinstance(name, str) else repr(name)},
            field="gateways",
        )
        self.name = name


class InvalidGatewayParameter(InvalidGatewayConfiguration):
    def __init__(self, gateway: str, parameter: str, reason: str):
        super().__init__(
            f"Invalid parameter '{parameter}' for gateway '{gateway}': {reason}",
            code=GatewayCode.GATEWAY_PARAMETER_INVALID,
            error_type="InvalidGatewayParameter",
            details={"gateway": gateway, "parameter": parameter, "reason": reason},
            field="gateways",
        )
        self.gateway = gateway
        self.parameter = parameter


class DuplicateGatewayName(InvalidGatewayConfiguration):
    def __init__(self, name: str, existing: Optional[str] = None):
        existing = existing if existing is not None else name
        super().__init__(
            f"Gateway '{name}' is configured more than once (conflicts with '{existing}')",
            code=GatewayCode.GATEWAY_DUPLICATE,
            error_type="DuplicateGatewayName",
            details={"gateway": name, "existing": existing},
            field="gateways",
        )
        self.name = name
        self.existing = existing


class UnknownDefaultGateway(InvalidGatewayConfiguration):
    def __init__(self, name: str, configured: Sequence[str] = ()):
        super().__init__(
            f"Default gateway '{name}' is not a configured gateway",
            code=GatewayCode.GATEWAY_DEFAULT_UNKNOWN,
            error_type="UnknownDefaultGateway",
            details={"gateway": name, "configured": list(configured)},
            field="default_gateway",
        )
        self.name = name


class UnknownDisabledGateway(InvalidGatewayConfiguration):
    def __init__(self, name: str, configured: Sequence[str] = ()):
        super().__init__(
            f"Disabled gateway '{name}' is not a configured gateway",
            code=GatewayCode.GATEWAY_DISABLED_UNKNOWN,
            error_type="UnknownDisabledGateway",
            details={"gateway": name, "configured": list(configured)},
            field="disabled_gateways",
        )
        self.name = name


class DefaultGatewayDisabled(InvalidGatewayConfiguration):
    def __init__(self, name: str):
        super().__init__(
            f"Default gateway '{name}' cannot be a disabled gateway",
            code=GatewayCode.GATEWAY_DEFAULT_DISABLED,
            error_type="DefaultGatewayDisabled",
            details={"gateway": name},
            field="default_gateway",
        )
        self.name = name


# ---------------------------------------------------------------------------
# Lookup errors (recoverable by the caller)
# ---------------------------------------------------------------------------


class GatewayLookupError(BusinessException):
    """Base class for errors raised by GatewayRegistry.get()."""


class NoDefaultGatewayConfigured(GatewayLookupError):
    def __init__(self):
        super().__init__(
            code=GatewayCode.GATEWAY_NO_DEFAULT,
            message="No gateway name given and no default gateway is configured",
            error_type="NoDefaultGatewayConfigured",
        )


class GatewayDisabled(GatewayLookupError):
    def __init__(self, name: str):
        super().__init__(
            code=GatewayCode.GATEWAY_DISABLED,
            message=f"Gateway '{name}' is disabled",
            error_type="GatewayDisabled",
            details={"gateway": name},
        )
        self.name = name


class UnknownGateway(GatewayLookupError):
    def __init__(self, name: str):
        super().__init__(
            code=GatewayCode.GATEWAY_NOT_FOUND,
            message=f"Gateway '{name}' is not configured",
            error_type="UnknownGateway",
            details={"gateway": name},
        )
        self.name = name


# ---------------------------------------------------------------------------
# Construction errors
# ---------------------------------------------------------------------------


class GatewayConstructionError(BusinessException):
    """Wraps a gateway factory failure with the gateway name.

    The original exception is kept as ``__cause__`` and ``cause``.
    """

    def __init__(self, name: str, cause: BaseException):
        super().__init__(
            code=GatewayCode.GATEWAY_CONSTRUCTION_FAILED,
            message=f"Failed to construct gateway '{name}': {cause}",
            error_type="GatewayConstructionError",
            details={"gateway": name, "error": type(cause).__name__},
        )
        self.name = name
        self.cause = cause
