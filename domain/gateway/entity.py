"""
网关配置实体 - 校验后的网关定义与注册表规格
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .naming import gateway_identity

# Gateway parameters are flat primitives (credentials, flags, numeric options)
ParameterValue = Union[str, bool, int, float]


@dataclass(frozen=True)
class GatewayConfig:
    """A named gateway and the parameters it is initialized with.

    ``parameters`` is frozen into a read-only mapping on construction.
    """

    name: str
    parameters: Mapping[str, ParameterValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def identity(self) -> str:
        return gateway_identity(self.name)

    def to_dict(self) -> dict[str, ParameterValue]:
        return dict(self.parameters)


@dataclass(frozen=True)
class RegistrySpec:
    """
    校验通过的完整网关配置

    不变量：
    1. 网关名称（按 identity）唯一
    2. default_gateway 若设置，必须是已配置且未禁用的网关
    3. disabled_gateways 中的每个名称都必须是已配置的网关
    """

    gateways: Tuple[GatewayConfig, ...] = ()
    default_gateway: Optional[str] = None
    disabled_gateways: frozenset[str] = frozenset()
    initialize_on_registration: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "gateways", tuple(self.gateways))
        object.__setattr__(self, "disabled_gateways", frozenset(self.disabled_gateways))

    def names(self) -> list[str]:
        """Configured gateway names in declaration order."""
        return [g.name for g in self.gateways]

    def enabled_names(self) -> list[str]:
        return [g.name for g in self.gateways if not self.is_disabled(g.name)]

    def get_config(self, name: str) -> Optional[GatewayConfig]:
        identity = gateway_identity(name)
        for config in self.gateways:
            if config.identity == identity:
                return config
        return None

    def is_configured(self, name: str) -> bool:
        return self.get_config(name) is not None

    def is_disabled(self, name: str) -> bool:
        identity = gateway_identity(name)
        return any(gateway_identity(d) == identity for d in self.disabled_gateways)

    def parameters(self) -> dict[str, dict[str, ParameterValue]]:
        """Plain ``{name: {param: value}}`` view of the configured gateways."""
        return {g.name: g.to_dict() for g in self.gateways}
