"""Tests for the products HTTP API."""

import pytest
from fastapi.testclient import TestClient

from craftcatalog.catalog import persistence
from craftcatalog.config import load_settings
from craftcatalog.main import create_app


@pytest.fixture
def client(data_file):
    app = create_app(load_settings(environ={}, data_file=data_file))
    return TestClient(app)


def test_health_check(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_products_uses_json_aliases(client):
    response = client.get("/products")

    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body] == ["test-laptop-1", "test-keyboard-1"]
    assert body[0]["subProducts"][0]["subCategory"] == "Dell"


def test_get_product_ignores_case(client):
    response = client.get("/products/TEST-LAPTOP-1")

    assert response.status_code == 200
    assert response.json()["brand"] == "TestBrand"


def test_get_unknown_product_is_404(client):
    assert client.get("/products/missing").status_code == 404


class TestRateProduct:
    def test_valid_rating_is_stored(self, client):
        response = client.patch("/products", json={"productId": "test-keyboard-1", "rating": 4})

        assert response.status_code == 200
        assert client.get("/products/test-keyboard-1").json()["ratings"] == [4]

    @pytest.mark.parametrize(
        "payload",
        [
            {"productId": "", "rating": 3},
            {"productId": "   ", "rating": 3},
            {"rating": 3},
            {"productId": "test-keyboard-1", "rating": 0},
            {"productId": "test-keyboard-1", "rating": 6},
        ],
    )
    def test_invalid_request_is_400(self, client, payload):
        response = client.patch("/products", json=payload)

        assert response.status_code == 400
        assert client.get("/products/test-keyboard-1").json()["ratings"] is None

    def test_unknown_product_is_404(self, client):
        response = client.patch("/products", json={"productId": "missing", "rating": 3})

        assert response.status_code == 404

    def test_write_failure_is_500(self, client, monkeypatch):
        def broken_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(persistence.os, "replace", broken_replace)

        response = client.patch("/products", json={"productId": "test-keyboard-1", "rating": 3})

        assert response.status_code == 500
