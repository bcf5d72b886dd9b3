import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from api.dependencies import gateway_provider
from core.config import Settings
from core.settings import PaymentGatewaySettings
from domain.common.exceptions import InvalidGatewayConfiguration, UnknownDefaultGateway
from main import create_app


def _settings(**payments) -> Settings:
    return Settings(_env_file=None, payments=PaymentGatewaySettings(**payments))


@pytest.fixture
def client(sample_gateways, factory):
    app = create_app(
        _settings(gateways=sample_gateways, default_gateway="Stripe", disabled_gateways=["PayPal_Express"]),
        gateway_factory=factory,
    )

    @app.get("/checkout")
    def checkout(gateway=Depends(gateway_provider())):
        return {"gateway": gateway.name}

    @app.get("/checkout/paypal")
    def checkout_paypal(gateway=Depends(gateway_provider("PayPal_Express"))):
        return {"gateway": gateway.name}

    with TestClient(app) as c:
        yield c


def test_list_gateways(client):
    resp = client.get("/api/v1/gateways")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["default_gateway"] == "Stripe"
    assert data["disabled_gateways"] == ["PayPal_Express"]
    assert [g["name"] for g in data["gateways"]] == ["Stripe"]


def test_get_gateway_hides_parameters(client):
    resp = client.get("/api/v1/gateways/stripe")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data == {"name": "Stripe", "is_default": True, "constructed": True, "class": "Stripe"}


def test_get_default_gateway(client):
    resp = client.get("/api/v1/default-gateway")
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Stripe"


def test_disabled_gateway_is_forbidden(client):
    resp = client.get("/api/v1/gateways/PayPal_Express")
    assert resp.status_code == 403
    body = resp.json()
    assert body["error"]["type"] == "GatewayDisabled"
    assert body["error"]["details"] == {"gateway": "PayPal_Express"}


def test_unknown_gateway_is_not_found(client):
    resp = client.get("/api/v1/gateways/Mollie")
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "UnknownGateway"


def test_gateway_dependency(client):
    assert client.get("/checkout").json() == {"gateway": "Stripe"}
    assert client.get("/checkout/paypal").status_code == 403


def test_no_default_gateway_is_bad_request(sample_gateways, factory):
    app = create_app(_settings(gateways=sample_gateways), gateway_factory=factory)
    with TestClient(app) as c:
        resp = c.get("/api/v1/default-gateway")
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "NoDefaultGatewayConfigured"


def test_construction_failure_is_service_unavailable(sample_gateways, make_factory):
    app = create_app(_settings(gateways=sample_gateways), gateway_factory=make_factory(fail_for=("Stripe",)))
    with TestClient(app) as c:
        resp = c.get("/api/v1/gateways/Stripe")
    assert resp.status_code == 503
    assert resp.json()["error"]["type"] == "GatewayConstructionError"


def test_invalid_config_aborts_startup(sample_gateways, factory):
    app = create_app(_settings(gateways=sample_gateways, default_gateway="Mollie"), gateway_factory=factory)
    with pytest.raises(UnknownDefaultGateway):
        with TestClient(app):
            pass


def test_eager_construction_failure_aborts_startup(sample_gateways, make_factory):
    from domain.common.exceptions import GatewayConstructionError

    app = create_app(
        _settings(gateways=sample_gateways, initialize_on_registration=True),
        gateway_factory=make_factory(fail_for=("PayPal_Express",)),
    )
    with pytest.raises(GatewayConstructionError):
        with TestClient(app):
            pass


def test_health(factory):
    with TestClient(create_app(_settings(), gateway_factory=factory)) as c:
        assert c.get("/health").json()["data"] == {"status": "healthy"}


def test_configuration_errors_share_a_base_class():
    assert issubclass(UnknownDefaultGateway, InvalidGatewayConfiguration)


@pytest.mark.asyncio
async def test_registry_dependency_requires_lifespan():
    from types import SimpleNamespace

    from api.dependencies import get_gateway_registry

    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
    with pytest.raises(RuntimeError):
        await get_gateway_registry(request)


def test_gateway_named_default_is_addressable(factory):
    gateways = {"Stripe": {"apiKey": "sk_test"}, "default": {"apiKey": "sk_other"}}
    app = create_app(_settings(gateways=gateways, default_gateway="Stripe"), gateway_factory=factory)
    with TestClient(app) as c:
        resp = c.get("/api/v1/gateways/default")
        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "default"
        assert c.get("/api/v1/default-gateway").json()["data"]["name"] == "Stripe"
