"""Pytest configuration and shared fixtures for catalog tests."""

import json

import pytest

from craftcatalog.catalog.store import CatalogStore

SEED_PRODUCTS = [
    {
        "id": "test-laptop-1",
        "brand": "TestBrand",
        "name": "Test Laptop",
        "type": "Laptop",
        "url": "https://test.com",
        "description": "Test Description",
        "image": "/assets/test.png",
        "ratings": [5, 4, 5],
        "subProducts": [
            {"id": "dell", "brand": "Dell", "name": "XPS 13", "category": "Laptop", "subCategory": "Dell"},
            {"id": "hp", "brand": "HP", "name": "Spectre", "category": "Laptop", "subCategory": "HP"},
        ],
    },
    {
        "id": "test-keyboard-1",
        "brand": "KeyboardBrand",
        "name": "Test Keyboard",
        "type": "Keyboard",
        "url": "https://keyboard.com",
        "description": "Keyboard Description",
        "image": "/assets/keyboard.png",
        "ratings": None,
    },
]


@pytest.fixture
def data_file(tmp_path):
    """Path of a catalog file seeded with two products."""
    path = tmp_path / "data" / "products.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(SEED_PRODUCTS, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def store(data_file):
    """Store over the seeded catalog file."""
    return CatalogStore(data_file)


@pytest.fixture
def empty_store(tmp_path):
    """Store whose backing file does not exist yet."""
    return CatalogStore(tmp_path / "missing" / "products.json")
