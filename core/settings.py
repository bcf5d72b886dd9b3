"""
Payment gateway settings, grouped under ``Settings.payments``.

Nested env keys use the ``__`` delimiter, e.g.::

    PAYMENTS__GATEWAYS='{"Stripe": {"apiKey": "sk_test_..."}}'
    PAYMENTS__DEFAULT_GATEWAY=Stripe
    PAYMENTS__DISABLED_GATEWAYS='["PayPal_Express"]'
    PAYMENTS__INITIALIZE_ON_REGISTRATION=true
    PAYMENTS__BUILDERS='{"Stripe": "acme_payments.stripe:StripeGateway"}'
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class PaymentGatewaySettings(BaseModel):
    # Gateway name -> gateway parameters (credentials, test mode flags, ...)
    gateways: dict[str, dict[str, Any]] = Field(default_factory=dict)
    default_gateway: Optional[str] = None
    disabled_gateways: list[str] = Field(default_factory=list)
    initialize_on_registration: bool = False
    # Gateway name -> "package.module:attr" builder registered on the plugin factory
    builders: dict[str, str] = Field(default_factory=dict)

    @field_validator("default_gateway", mode="before")
    @classmethod
    def _blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("disabled_gateways", mode="before")
    @classmethod
    def _parse_disabled(cls, v):
        """允许列表或逗号分隔字符串（直接构造时）。"""
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    def to_raw(self) -> dict[str, Any]:
        """Render as the raw configuration schema accepted by the validator."""
        return {
            "gateways": {name: dict(params or {}) for name, params in self.gateways.items()},
            "defaultGateway": self.default_gateway,
            "disabledGateways": list(self.disabled_gateways),
            "initializeOnRegistration": self.initialize_on_registration,
        }
