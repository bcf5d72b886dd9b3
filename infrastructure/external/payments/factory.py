"""Gateway factory with registry pattern.

Gateway names resolve to a *builder*, a callable taking the gateway parameters
and returning a gateway object. Resolution order:

1. builders registered with :meth:`PluginGatewayFactory.register`
2. explicit import paths, ``"package.module:attr"``
3. installed entry points in the ``gatewayhub.gateways`` group

If the built object has an ``initialize(parameters)`` method it is called with
the same parameters before the object is returned.
"""
from __future__ import annotations

import importlib
from importlib.metadata import entry_points
from typing import Any, Callable, Mapping, Optional, Union

from core.logging_config import get_logger
from domain.gateway.naming import gateway_identity, normalize_gateway_name, split_import_path
from .exceptions import UnsupportedGatewayError

logger = get_logger(__name__)

ENTRY_POINT_GROUP = "gatewayhub.gateways"

# Builder type
GatewayBuilder = Callable[[dict[str, Any]], Any]


class PluginGatewayFactory:
    """Creates gateway instances by name; implements the GatewayFactory port."""

    def __init__(
        self,
        builders: Optional[Mapping[str, Union[GatewayBuilder, str]]] = None,
        *,
        entry_point_group: Optional[str] = ENTRY_POINT_GROUP,
    ):
        self._builders: dict[str, tuple[str, GatewayBuilder]] = {}
        self._entry_point_group = entry_point_group
        for name, builder in (builders or {}).items():
            self.register(name, builder)

    def register(self, name: str, builder: Union[GatewayBuilder, str]) -> None:
        """Register a gateway builder.

        Args:
            name: Gateway name (compared by identity)
            builder: Callable taking the parameter dict, or a "module:attr" path to one
        """
        name = normalize_gateway_name(name)
        if isinstance(builder, str):
            builder = self._import(name, builder)
        if not callable(builder):
            raise TypeError(f"Gateway builder for '{name}' must be callable")
        self._builders[gateway_identity(name)] = (name, builder)
        logger.info("gateway_builder_registered", gateway=name)

    def available(self) -> list[str]:
        """Names of explicitly registered builders."""
        return [name for name, _ in self._builders.values()]

    def supports(self, name: str) -> bool:
        try:
            self.resolve(name)
        except UnsupportedGatewayError:
            return False
        return True

    def resolve(self, name: str) -> GatewayBuilder:
        """Find the builder for a gateway name.

        Raises:
            UnsupportedGatewayError: if no builder can be found
        """
        name = normalize_gateway_name(name)
        registered = self._builders.get(gateway_identity(name))
        if registered is not None:
            return registered[1]

        if split_import_path(name) is not None:
            return self._import(name, name)

        builder = self._from_entry_points(name)
        if builder is not None:
            return builder

        raise UnsupportedGatewayError(
            name,
            reason="no builder registered",
            details={"available": self.available()},
        )

    def create(self, name: str, parameters: Mapping[str, Any]) -> Any:
        """Build and initialize a gateway instance.

        Args:
            name: Gateway name
            parameters: Gateway parameters

        Returns:
            The gateway instance
        """
        builder = self.resolve(name)
        params = dict(parameters)
        gateway = builder(params)
        initialize = getattr(gateway, "initialize", None)
        if callable(initialize):
            initialize(dict(params))
        logger.debug("gateway_created", gateway=name)
        return gateway

    def _import(self, name: str, path: str) -> GatewayBuilder:
        parts = split_import_path(path)
        if parts is None:
            raise UnsupportedGatewayError(name, reason=f"'{path}' is not a 'module:attr' path")
        module_path, attr = parts
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise UnsupportedGatewayError(name, reason=f"cannot import '{module_path}': {e}") from e
        target: Any = module
        for part in attr.split("."):
            try:
                target = getattr(target, part)
            except AttributeError as e:
                raise UnsupportedGatewayError(
                    name, reason=f"'{module_path}' has no attribute '{attr}'"
                ) from e
        return target

    def _from_entry_points(self, name: str) -> Optional[GatewayBuilder]:
        if not self._entry_point_group:
            return None
        identity = gateway_identity(name)
        for ep in entry_points(group=self._entry_point_group):
            if gateway_identity(ep.name) == identity:
                try:
                    return ep.load()
                except (ImportError, AttributeError) as e:
                    raise UnsupportedGatewayError(
                        name, reason=f"entry point '{ep.value}' failed to load: {e}"
                    ) from e
        return None
