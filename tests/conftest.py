"""Pytest bootstrap configuration.

Shared fixtures: the sample gateway configuration and stub gateway factories.
"""
import os
import threading
from typing import Any, Mapping

import pytest

# Keep settings deterministic regardless of the developer's shell / .env
for _key in list(os.environ):
    if _key.upper().startswith("PAYMENTS__"):
        del os.environ[_key]


SAMPLE_GATEWAYS = {
    "Stripe": {
        "apiKey": "sk_test_BQokikJOvBiI2HlWgH4olfQ2",
    },
    "PayPal_Express": {
        "username": "test-facilitator_api1.example.com",
        "password": "3MPI3VB4NVQ3XSVF",
        "signature": "6fB0XmM3ODhbVdfev2hUXL2x7QWxXlb1dERTKhtWaABmpiCK1wtfcWd.",
        "testMode": False,
        "solutionType": "Sole",
        "landingPage": "Login",
    },
}


class StubGateway:
    def __init__(self, name: str, parameters: Mapping[str, Any]):
        self.name = name
        self.parameters = dict(parameters)


class StripeGateway(StubGateway):
    pass


class StubFactory:
    """GatewayFactory recording every create() call."""

    def __init__(self, fail_for: tuple = ()):
        self.calls: list[str] = []
        self.fail_for = set(fail_for)
        self._lock = threading.Lock()

    def create(self, name: str, parameters: Mapping[str, Any]) -> Any:
        with self._lock:
            self.calls.append(name)
        if name in self.fail_for:
            raise ConnectionError(f"{name} backend unreachable")
        if name == "Stripe":
            return StripeGateway(name, parameters)
        return StubGateway(name, parameters)


@pytest.fixture
def sample_gateways() -> dict:
    return {name: dict(params) for name, params in SAMPLE_GATEWAYS.items()}


@pytest.fixture
def raw_config(sample_gateways) -> dict:
    return {"gateways": sample_gateways}


@pytest.fixture
def factory() -> StubFactory:
    return StubFactory()


@pytest.fixture
def make_factory():
    return StubFactory
