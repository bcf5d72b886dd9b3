"""
Gateway registry: the single entry point application code uses to obtain a
configured payment gateway by name.

The registry is built once from a validated RegistrySpec in the composition
root and handed to consumers by reference. Each configured gateway moves from
unconstructed to constructed exactly once, either eagerly in ``build()`` (when
``initialize_on_registration`` is set) or on its first successful lookup.
Disabled gateways are never constructed.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from application.ports.gateway_factory import GatewayFactory
from core.logging_config import get_logger
from domain.common.exceptions import (
    DuplicateGatewayName,
    GatewayConstructionError,
    GatewayDisabled,
    InvalidGatewayName,
    NoDefaultGatewayConfigured,
    UnknownGateway,
)
from domain.gateway.entity import GatewayConfig, RegistrySpec
from domain.gateway.naming import gateway_identity, normalize_gateway_name, short_name


logger = get_logger(__name__)


@dataclass(eq=False)
class _Entry:
    config: GatewayConfig
    disabled: bool = False
    instance: Any = None
    constructed: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def name(self) -> str:
        return self.config.name


class GatewayRegistry:
    """
    Registry of configured gateways.

    Lookups are safe to call from several threads: construction of a given
    gateway is serialized on a per-gateway lock, so concurrent first lookups
    observe one fully constructed instance.
    """

    def __init__(self, spec: RegistrySpec, factory: GatewayFactory):
        self._spec = spec
        self._factory = factory
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {
            config.identity: _Entry(config=config, disabled=spec.is_disabled(config.name))
            for config in spec.gateways
        }

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def spec(self) -> RegistrySpec:
        return self._spec

    @property
    def default_gateway_name(self) -> Optional[str]:
        return self._spec.default_gateway

    @property
    def disabled_gateway_names(self) -> list[str]:
        return [e.name for e in self._snapshot() if e.disabled]

    @property
    def initialize_on_registration(self) -> bool:
        return self._spec.initialize_on_registration

    def names(self) -> list[str]:
        """Names of the gateways that can be looked up (disabled ones excluded)."""
        return [e.name for e in self._snapshot() if not e.disabled]

    def is_constructed(self, name: str) -> bool:
        entry = self._find(name)
        return entry is not None and entry.constructed

    def list_gateways(self) -> list[dict[str, Any]]:
        """
        List lookup-able gateways.

        Returns:
            List of gateway info dicts (parameters are never included)
        """
        return [self._info(e) for e in self._snapshot() if not e.disabled]

    def describe(self, name: Optional[str] = None) -> dict[str, Any]:
        """Look up a gateway (constructing it if needed) and return its info dict."""
        self.get(name)
        return self._info(self._find(name if name is not None else self._spec.default_gateway))

    def __contains__(self, name: object) -> bool:
        entry = self._find(name)
        return entry is not None and not entry.disabled

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.names())

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: Optional[str] = None) -> Any:
        """
        Get a gateway instance by name.

        Args:
            name: Gateway name; the default gateway when omitted

        Returns:
            The gateway instance, the same object for every call with this name

        Raises:
            NoDefaultGatewayConfigured: no name given and no default configured
            GatewayDisabled: the gateway is configured but disabled
            UnknownGateway: the gateway is not configured
            GatewayConstructionError: the gateway factory failed
        """
        if name is None:
            if self._spec.default_gateway is None:
                raise NoDefaultGatewayConfigured()
            name = self._spec.default_gateway

        entry = self._find(name)
        if entry is None:
            raise UnknownGateway(name)
        if entry.disabled:
            raise GatewayDisabled(entry.name)
        return self._construct(entry)

    def get_default(self) -> Any:
        return self.get(None)

    def initialize(self) -> None:
        """Construct every enabled gateway in declaration order; stops at the first failure."""
        for entry in self._snapshot():
            if not entry.disabled:
                self._construct(entry)

    # ------------------------------------------------------------------
    # Custom gateways
    # ------------------------------------------------------------------

    def register(self, name: str, gateway: Any) -> None:
        """
        Register an already constructed gateway under ``name``.

        A configured gateway registered this way is never built by the factory.
        When ``initialize_on_registration`` is set and the gateway has an
        ``initialize(parameters)`` method, it is called with the configured
        parameters for that name.

        Raises:
            GatewayDisabled: ``name`` is a disabled gateway
            DuplicateGatewayName: ``name`` already has a constructed instance
            GatewayConstructionError: the gateway's ``initialize`` failed
        """
        name = normalize_gateway_name(name)
        identity = gateway_identity(name)
        with self._lock:
            entry = self._entries.get(identity)
        if entry is not None and entry.disabled:
            raise GatewayDisabled(entry.name)

        if entry is None:
            # unconfigured names join the registry only once fully registered
            new_entry = _Entry(config=GatewayConfig(name=name))
            self._attach(new_entry, gateway)
            with self._lock:
                existing = self._entries.get(identity)
                if existing is not None:
                    raise DuplicateGatewayName(name, existing.name)
                self._entries[identity] = new_entry
            entry = new_entry
        else:
            with entry.lock:
                if entry.constructed:
                    raise DuplicateGatewayName(name, entry.name)
                self._attach(entry, gateway)

        logger.info("gateway_registered", gateway=entry.name, gateway_class=short_name(gateway))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _attach(self, entry: _Entry, gateway: Any) -> None:
        if self._spec.initialize_on_registration:
            initialize = getattr(gateway, "initialize", None)
            if callable(initialize):
                try:
                    initialize(entry.config.to_dict())
                except Exception as exc:
                    logger.error(
                        "gateway_construction_failed",
                        gateway=entry.name,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    raise GatewayConstructionError(entry.name, exc) from exc
        entry.instance = gateway
        entry.constructed = True

    def _snapshot(self) -> list[_Entry]:
        with self._lock:
            return list(self._entries.values())

    def _info(self, entry: _Entry) -> dict[str, Any]:
        return {
            "name": entry.name,
            "is_default": entry.name == self._spec.default_gateway,
            "constructed": entry.constructed,
            "class": short_name(entry.instance) if entry.constructed else None,
        }

    def _find(self, name: object) -> Optional[_Entry]:
        try:
            return self._entries.get(gateway_identity(name))
        except InvalidGatewayName:
            return None

    def _construct(self, entry: _Entry) -> Any:
        if entry.constructed:
            return entry.instance
        with entry.lock:
            if not entry.constructed:
                try:
                    instance = self._factory.create(entry.name, entry.config.to_dict())
                except Exception as exc:
                    logger.error(
                        "gateway_construction_failed",
                        gateway=entry.name,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    raise GatewayConstructionError(entry.name, exc) from exc
                entry.instance = instance
                entry.constructed = True
                logger.info("gateway_constructed", gateway=entry.name, gateway_class=short_name(instance))
        return entry.instance


def build(spec: RegistrySpec, factory: GatewayFactory) -> GatewayRegistry:
    """
    Build the runtime registry from a validated spec.

    With ``initialize_on_registration`` every enabled gateway is constructed
    here and any factory failure aborts the build; otherwise construction is
    deferred to the first lookup of each gateway.

    Raises:
        GatewayConstructionError: eager construction failed for a gateway
    """
    registry = GatewayRegistry(spec, factory)
    if spec.initialize_on_registration:
        registry.initialize()
    logger.info(
        "gateway_registry_built",
        gateways=registry.names(),
        default_gateway=spec.default_gateway,
        disabled_gateways=sorted(spec.disabled_gateways),
        eager=spec.initialize_on_registration,
    )
    return registry
