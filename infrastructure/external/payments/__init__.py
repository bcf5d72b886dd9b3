"""
Factory for payment gateway instances.
"""
from __future__ import annotations

from core.settings import PaymentGatewaySettings
from .exceptions import UnsupportedGatewayError
from .factory import ENTRY_POINT_GROUP, GatewayBuilder, PluginGatewayFactory


def create_gateway_factory(payment_settings: PaymentGatewaySettings) -> PluginGatewayFactory:
    """Plugin factory with the builders named in settings already registered."""
    return PluginGatewayFactory(builders=dict(payment_settings.builders))


__all__ = [
    "ENTRY_POINT_GROUP",
    "GatewayBuilder",
    "PluginGatewayFactory",
    "UnsupportedGatewayError",
    "create_gateway_factory",
]
