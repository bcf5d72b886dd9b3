"""
Gateway registry codes: configuration (7xxxx) and lookup/construction (71xxx).
"""
from __future__ import annotations

from enum import IntEnum


class GatewayCode(IntEnum):
    # Configuration errors, fatal at startup (70xxx)
    GATEWAY_CONFIG_INVALID = 70000
    GATEWAY_NAME_INVALID = 70001
    GATEWAY_PARAMETER_INVALID = 70002
    GATEWAY_DUPLICATE = 70003
    GATEWAY_DEFAULT_UNKNOWN = 70004
    GATEWAY_DISABLED_UNKNOWN = 70005
    GATEWAY_DEFAULT_DISABLED = 70006

    # Lookup errors, recoverable by the caller (71xxx)
    GATEWAY_NO_DEFAULT = 71000
    GATEWAY_DISABLED = 71001
    GATEWAY_NOT_FOUND = 71002

    # Construction errors (72xxx)
    GATEWAY_CONSTRUCTION_FAILED = 72000
    GATEWAY_UNSUPPORTED = 72001


# Codes that describe a broken configuration rather than a bad request
CONFIGURATION_CODES = frozenset(
    {
        GatewayCode.GATEWAY_CONFIG_INVALID,
        GatewayCode.GATEWAY_NAME_INVALID,
        GatewayCode.GATEWAY_PARAMETER_INVALID,
        GatewayCode.GATEWAY_DUPLICATE,
        GatewayCode.GATEWAY_DEFAULT_UNKNOWN,
        GatewayCode.GATEWAY_DISABLED_UNKNOWN,
        GatewayCode.GATEWAY_DEFAULT_DISABLED,
    }
)
