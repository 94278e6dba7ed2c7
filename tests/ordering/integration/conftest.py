import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.errors import register_error_handlers
from ordering.api.routes import address_router, admin_router, cart_router, order_router


@pytest.fixture()
def app():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(admin_router)
    app.include_router(cart_router)
    app.include_router(address_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def customer_headers():
    return {"X-User-Id": "cust-001", "X-User-Approved": "true", "X-Price-Multiplier": "1.0"}


@pytest.fixture()
def admin_headers():
    return {"X-User-Id": "admin-1", "X-User-Role": "ADMIN", "X-User-Approved": "true"}


@pytest.fixture()
def stocked(catalogue):
    catalogue.stock("rose-red", 50.0, name="Red Rose")
    catalogue.stock("tulip-white", 30.0, variant_id="stem-60", name="White Tulip 60cm")
    catalogue.stock("ranunculus", None, name="Ranunculus (market)")
    return catalogue

