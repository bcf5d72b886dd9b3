"""Gateway configuration domain exports."""
from .entity import GatewayConfig, RegistrySpec
from .naming import gateway_identity, normalize_gateway_name
from .validator import validate

__all__ = [
    "GatewayConfig",
    "RegistrySpec",
    "gateway_identity",
    "normalize_gateway_name",
    "validate",
]
