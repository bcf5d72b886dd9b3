"""
Exceptions raised by the gateway factory, mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Optional

from domain.common.exceptions import BusinessException
from shared.codes.gateway_codes import GatewayCode


class UnsupportedGatewayError(BusinessException):
    def __init__(self, name: str, *, reason: str, details: Optional[dict] = None):
        full_details = {"gateway": name, "reason": reason}
        if details:
            full_details.update(details)
        super().__init__(
            code=GatewayCode.GATEWAY_UNSUPPORTED,
            message=f"Cannot resolve gateway '{name}': {reason}",
            error_type="UnsupportedGatewayError",
            details=full_details,
        )
        self.name = name
