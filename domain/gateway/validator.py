"""
网关配置校验 - 把原始配置转换为 RegistrySpec

Raw configuration follows the schema::

    gateways:
      <gateway-name>: { <param-name>: <string|bool|number>, ... }
    defaultGateway: <gateway-name>            # optional
    disabledGateways: [ <gateway-name>, ... ] # optional, default empty
    initializeOnRegistration: <bool>          # optional, default false

snake_case keys (``default_gateway`` ...) are accepted as well. ``gateways`` may
also be a list of ``(name, parameters)`` pairs or of ``{"name", "parameters"}``
entries, which is the only shape able to carry duplicate names.

Rules are checked in order and the first violation is raised:

1. gateway names are non-empty and unique (by identity)
2. the default gateway is configured
3. every disabled gateway is configured
4. the default gateway is not disabled
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from domain.common.exceptions import (
    DefaultGatewayDisabled,
    DuplicateGatewayName,
    InvalidGatewayConfiguration,
    InvalidGatewayName,
    InvalidGatewayParameter,
    UnknownDefaultGateway,
    UnknownDisabledGateway,
)
from .entity import GatewayConfig, RegistrySpec
from .naming import gateway_identity, normalize_gateway_name

_PARAMETER_VALUE = TypeAdapter(Union[StrictBool, StrictInt, StrictFloat, StrictStr])


class RawGatewayConfig(BaseModel):
    """Shape of the raw configuration, before the registry rules apply."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    gateways: list[tuple[Any, dict[StrictStr, Any]]] = Field(default_factory=list)
    default_gateway: Optional[StrictStr] = Field(default=None, alias="defaultGateway")
    disabled_gateways: list[StrictStr] = Field(default_factory=list, alias="disabledGateways")
    initialize_on_registration: StrictBool = Field(default=False, alias="initializeOnRegistration")

    @field_validator("gateways", mode="before")
    @classmethod
    def _gateway_entries(cls, v: Any):
        if v is None:
            return []
        if isinstance(v, Mapping):
            return [(name, params if params is not None else {}) for name, params in v.items()]
        if isinstance(v, (list, tuple)):
            entries = []
            for item in v:
                if isinstance(item, Mapping) and "name" in item:
                    params = item.get("parameters", item.get("params"))
                    entries.append((item["name"], params if params is not None else {}))
                elif isinstance(item, (list, tuple)) and len(item) == 2:
                    name, params = item
                    entries.append((name, params if params is not None else {}))
                else:
                    raise ValueError("gateway entries must be (name, parameters) pairs")
            return entries
        raise ValueError("gateways must be a mapping of name to parameters")

    @field_validator("disabled_gateways", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any):
        return [] if v is None else v


def parse_raw_config(raw: Mapping[str, Any]) -> RawGatewayConfig:
    if isinstance(raw, RawGatewayConfig):
        return raw
    try:
        return RawGatewayConfig.model_validate(dict(raw or {}))
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise InvalidGatewayConfiguration(
            f"Invalid gateway configuration at '{loc}': {first.get('msg', 'invalid value')}",
            details={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
            field=loc or None,
        ) from exc


def _lookup(by_identity: Mapping[str, GatewayConfig], name: str) -> Optional[GatewayConfig]:
    # a blank reference can never match a configured gateway
    try:
        return by_identity.get(gateway_identity(name))
    except InvalidGatewayName:
        return None


def _check_parameters(name: str, params: Mapping[str, Any]) -> dict[str, Any]:
    checked = {}
    for key, value in params.items():
        try:
            checked[key] = _PARAMETER_VALUE.validate_python(value)
        except ValidationError as exc:
            raise InvalidGatewayParameter(
                name, key, f"expected string, boolean or number, got {type(value).__name__}"
            ) from exc
    return checked


def validate(raw: Mapping[str, Any]) -> RegistrySpec:
    """
    校验原始网关配置并生成 RegistrySpec

    Args:
        raw: configuration mapping (see module docstring)

    Returns:
        The validated, immutable RegistrySpec

    Raises:
        InvalidGatewayConfiguration: or one of its subclasses naming the
            violated rule and the offending gateway
    """
    parsed = parse_raw_config(raw)

    # 1. names
    configs: list[GatewayConfig] = []
    by_identity: dict[str, GatewayConfig] = {}
    for raw_name, params in parsed.gateways:
        name = normalize_gateway_name(raw_name)
        identity = gateway_identity(name)
        if identity in by_identity:
            raise DuplicateGatewayName(name, by_identity[identity].name)
        config = GatewayConfig(name=name, parameters=_check_parameters(name, params))
        by_identity[identity] = config
        configs.append(config)

    configured = [c.name for c in configs]

    # 2. default gateway
    default_name = None
    if parsed.default_gateway is not None:
        default_config = _lookup(by_identity, parsed.default_gateway)
        if default_config is None:
            raise UnknownDefaultGateway(parsed.default_gateway.strip(), configured)
        default_name = default_config.name

    # 3. disabled gateways
    disabled = set()
    for raw_name in parsed.disabled_gateways:
        disabled_config = _lookup(by_identity, raw_name)
        if disabled_config is None:
            raise UnknownDisabledGateway(raw_name.strip(), configured)
        disabled.add(disabled_config.name)

    # 4. default must stay enabled
    if default_name is not None and default_name in disabled:
        raise DefaultGatewayDisabled(default_name)

    return RegistrySpec(
        gateways=tuple(configs),
        default_gateway=default_name,
        disabled_gateways=frozenset(disabled),
        initialize_on_registration=parsed.initialize_on_registration,
    )
