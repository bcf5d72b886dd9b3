"""
Gateway factory port (application/ports) exposing a replaceable protocol.

The registry depends on this Protocol; infrastructure (or tests) supply the
implementation from the composition root.
"""
from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class GatewayFactory(Protocol):
    """Builds a configured gateway instance from its name and parameters.

    Gateways are opaque to the registry. Implementations raise on failure;
    the registry wraps the error with the gateway name.
    """

    def create(self, name: str, parameters: Mapping[str, Any]) -> Any: ...
