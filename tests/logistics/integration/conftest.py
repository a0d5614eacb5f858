import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from logistics.api.errors import register_error_handlers
from logistics.api.routers import routers


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)
