import pytest

from domain.common.exceptions import (
    DefaultGatewayDisabled,
    DuplicateGatewayName,
    InvalidGatewayConfiguration,
    InvalidGatewayName,
    InvalidGatewayParameter,
    UnknownDefaultGateway,
    UnknownDisabledGateway,
)
from domain.gateway.validator import validate
from shared.codes.gateway_codes import GatewayCode


def test_valid_config_round_trips_names_and_parameters(raw_config, sample_gateways):
    spec = validate(raw_config)
    assert spec.names() == ["Stripe", "PayPal_Express"]
    assert spec.parameters() == sample_gateways
    assert spec.default_gateway is None
    assert spec.disabled_gateways == frozenset()
    assert spec.initialize_on_registration is False


def test_parameters_are_read_only(raw_config):
    spec = validate(raw_config)
    with pytest.raises(TypeError):
        spec.get_config("Stripe").parameters["apiKey"] = "changed"


def test_validate_does_not_alias_input(raw_config):
    spec = validate(raw_config)
    raw_config["gateways"]["Stripe"]["apiKey"] = "mutated"
    assert spec.get_config("Stripe").parameters["apiKey"] == "sk_test_BQokikJOvBiI2HlWgH4olfQ2"


def test_default_and_disabled_gateways(raw_config):
    raw_config.update(defaultGateway="Stripe", disabledGateways=["PayPal_Express"])
    spec = validate(raw_config)
    assert spec.default_gateway == "Stripe"
    assert spec.disabled_gateways == frozenset({"PayPal_Express"})
    assert spec.enabled_names() == ["Stripe"]


def test_snake_case_keys_accepted(raw_config):
    raw_config.update(default_gateway="Stripe", initialize_on_registration=True)
    spec = validate(raw_config)
    assert spec.default_gateway == "Stripe"
    assert spec.initialize_on_registration is True


def test_names_resolve_to_configured_spelling(raw_config):
    raw_config.update(defaultGateway=" stripe ", disabledGateways=["paypal_express"])
    spec = validate(raw_config)
    assert spec.default_gateway == "Stripe"
    assert spec.disabled_gateways == frozenset({"PayPal_Express"})


def test_empty_config_is_valid():
    spec = validate({})
    assert spec.names() == []
    assert spec.default_gateway is None


def test_duplicate_gateway_name():
    raw = {"gateways": [("Stripe", {"apiKey": "a"}), ("Stripe", {"apiKey": "b"})]}
    with pytest.raises(DuplicateGatewayName) as ei:
        validate(raw)
    assert ei.value.name == "Stripe"
    assert ei.value.code == GatewayCode.GATEWAY_DUPLICATE


def test_duplicate_gateway_name_differing_only_in_case():
    raw = {"gateways": [{"name": "Stripe", "parameters": {}}, {"name": "stripe ", "parameters": {}}]}
    with pytest.raises(DuplicateGatewayName) as ei:
        validate(raw)
    assert ei.value.details == {"gateway": "stripe", "existing": "Stripe"}


@pytest.mark.parametrize("name", ["", "   "])
def test_blank_gateway_name(name):
    with pytest.raises(InvalidGatewayName):
        validate({"gateways": {name: {}}})


def test_unknown_default_gateway(raw_config):
    raw_config["defaultGateway"] = "Authorize_Net"
    with pytest.raises(UnknownDefaultGateway) as ei:
        validate(raw_config)
    assert ei.value.name == "Authorize_Net"
    assert ei.value.details["configured"] == ["Stripe", "PayPal_Express"]


def test_unknown_disabled_gateway(raw_config):
    raw_config["disabledGateways"] = ["Stripe", "Mollie"]
    with pytest.raises(UnknownDisabledGateway) as ei:
        validate(raw_config)
    assert ei.value.name == "Mollie"


def test_blank_default_gateway_is_unknown(raw_config):
    raw_config["defaultGateway"] = "  "
    with pytest.raises(UnknownDefaultGateway) as ei:
        validate(raw_config)
    assert ei.value.field == "default_gateway"
    assert ei.value.code == GatewayCode.GATEWAY_DEFAULT_UNKNOWN


def test_blank_disabled_gateway_is_unknown(raw_config):
    raw_config["disabledGateways"] = [""]
    with pytest.raises(UnknownDisabledGateway) as ei:
        validate(raw_config)
    assert ei.value.code == GatewayCode.GATEWAY_DISABLED_UNKNOWN


def test_disabled_default_gateway(raw_config):
    raw_config.update(defaultGateway="Stripe", disabledGateways=["Stripe"])
    with pytest.raises(DefaultGatewayDisabled) as ei:
        validate(raw_config)
    assert ei.value.name == "Stripe"
    assert ei.value.field == "default_gateway"


def test_rules_short_circuit_in_order(raw_config):
    # Unknown default is reported before the unknown disabled gateway
    raw_config.update(defaultGateway="Mollie", disabledGateways=["Adyen"])
    with pytest.raises(UnknownDefaultGateway):
        validate(raw_config)


def test_disabling_every_gateway_without_default_is_valid(raw_config):
    raw_config["disabledGateways"] = ["Stripe", "PayPal_Express"]
    spec = validate(raw_config)
    assert spec.enabled_names() == []


@pytest.mark.parametrize("value", [None, ["a"], {"nested": 1}])
def test_non_primitive_parameter(raw_config, value):
    raw_config["gateways"]["Stripe"]["apiKey"] = value
    with pytest.raises(InvalidGatewayParameter) as ei:
        validate(raw_config)
    assert ei.value.gateway == "Stripe"
    assert ei.value.parameter == "apiKey"


def test_numeric_parameters_accepted():
    spec = validate({"gateways": {"Dummy": {"timeout": 30, "ratio": 0.5, "testMode": True}}})
    assert spec.parameters() == {"Dummy": {"timeout": 30, "ratio": 0.5, "testMode": True}}


def test_gateway_without_parameters():
    spec = validate({"gateways": {"Dummy": None}})
    assert spec.parameters() == {"Dummy": {}}


def test_unknown_top_level_key_rejected(raw_config):
    raw_config["defaultGatway"] = "Stripe"
    with pytest.raises(InvalidGatewayConfiguration) as ei:
        validate(raw_config)
    assert ei.value.code == GatewayCode.GATEWAY_CONFIG_INVALID


def test_initialize_on_registration_must_be_boolean(raw_config):
    raw_config["initializeOnRegistration"] = "yes"
    with pytest.raises(InvalidGatewayConfiguration):
        validate(raw_config)


def test_gateways_must_be_mapping_or_pairs():
    with pytest.raises(InvalidGatewayConfiguration):
        validate({"gateways": "Stripe"})
