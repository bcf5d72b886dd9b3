"""
Gateway name normalization.

A gateway is addressed by the name it was configured under. Lookups compare
names by *identity*: surrounding whitespace is ignored and the comparison is
case-insensitive, so ``"Stripe"`` and ``" stripe "`` address the same gateway.
The configured spelling is kept for display and round-tripping.
"""
from __future__ import annotations

from typing import Any, Optional, Tuple

from domain.common.exceptions import InvalidGatewayName

IMPORT_PATH_SEPARATOR = ":"
GATEWAY_CLASS_SUFFIX = "Gateway"


def normalize_gateway_name(name: Any) -> str:
    """Return the display form of a gateway name.

    Raises:
        InvalidGatewayName: if ``name`` is not a string or is blank
    """
    if not isinstance(name, str):
        raise InvalidGatewayName(name)
    normalized = name.strip()
    if not normalized:
        raise InvalidGatewayName(name)
    return normalized


def gateway_identity(name: Any) -> str:
    """Return the key two gateway names are compared by."""
    return normalize_gateway_name(name).casefold()


def same_gateway(left: str, right: str) -> bool:
    return gateway_identity(left) == gateway_identity(right)


def is_import_path(name: str) -> bool:
    module, _, attr = name.partition(IMPORT_PATH_SEPARATOR)
    return bool(module and attr)


def split_import_path(name: str) -> Optional[Tuple[str, str]]:
    """Split ``"package.module:attr"`` into ``("package.module", "attr")``.

    Returns None for plain gateway names.
    """
    if not is_import_path(name):
        return None
    module, _, attr = name.strip().partition(IMPORT_PATH_SEPARATOR)
    return module.strip(), attr.strip()


def short_name(gateway: Any) -> str:
    """Render a gateway class or instance as a short display name.

    ``StripeGateway`` -> ``Stripe``; names without the suffix are returned as-is.
    """
    cls = gateway if isinstance(gateway, type) else type(gateway)
    name = cls.__name__
    if name.endswith(GATEWAY_CLASS_SUFFIX) and len(name) > len(GATEWAY_CLASS_SUFFIX):
        return name[: -len(GATEWAY_CLASS_SUFFIX)]
    return name
