"""Shared fixtures: a small catalog covering every export."""

import copy
import json

import pytest

from catalog_export.settings import ExportSettings, settings_from_mapping
from catalog_export.store import store_from_mapping

CATALOG = {
    "categories": [
        {"id": 1, "name": "A", "display_order": 0, "published": True},
        {"id": 3, "name": "C", "parent_category_id": 1, "display_order": 2},
        {"id": 2, "name": "B", "parent_category_id": 1, "display_order": 1},
    ],
    "manufacturers": [
        {"id": 1, "name": "Acme", "picture_id": 500},
        {"id": 2, "name": "Globex"},
    ],
    "products": [
        {
            "id": 10,
            "name": "Widget",
            "price": "9.99",
            "vendor_id": 1,
            "product_type": 5,
            "admin_comment": "internal",
            "created_on_utc": "2024-01-02T03:04:05Z",
            "attribute_mappings": [
                {
                    "id": 100,
                    "product_attribute_id": 7,
                    "product_attribute_name": "Color",
                    "attribute_control_type": 1,
                    "values": [
                        {"id": 1000, "name": "Red"},
                        {"id": 1001, "name": "Blue", "is_pre_selected": True, "display_order": 1},
                    ],
                },
                {
                    "id": 101,
                    "product_attribute_id": 8,
                    "product_attribute_name": "Engraving",
                    "attribute_control_type": 4,
                    "validation_max_length": 20,
                    "display_order": 1,
                },
            ],
            "pictures": [
                {"id": 1, "picture_id": 501, "display_order": 1},
                {"id": 2, "picture_id": 500, "display_order": 0},
            ],
            "tags": [{"id": 1, "name": "new"}, {"id": 2, "name": "sale"}],
            "tier_prices": [{"id": 1, "quantity": 10, "price": "8.50"}],
            "discounts": [{"id": 3, "name": "Spring"}],
        },
        {"id": 11, "name": "Gadget", "price": "20", "product_type": 10},
        {"id": 12, "name": "Old", "deleted": True},
        {"id": 13, "name": "Thing", "price": "1"},
    ],
    "product_categories": [
        {"id": 1, "product_id": 10, "category_id": 1},
        {"id": 2, "product_id": 12, "category_id": 2},
        {"id": 3, "product_id": 13, "category_id": 3, "is_featured_product": True},
    ],
    "product_manufacturers": [
        {"id": 1, "product_id": 10, "manufacturer_id": 1, "display_order": 0},
        {"id": 2, "product_id": 10, "manufacturer_id": 2, "display_order": 1},
        {"id": 3, "product_id": 12, "manufacturer_id": 1, "display_order": 2},
    ],
    "pictures": [
        {"id": 500, "seo_filename": "widget-front", "mime_type": "image/jpeg"},
        {"id": 501, "mime_type": "image/png"},
    ],
    "vendors": [{"id": 1, "name": "Vendor One"}],
    "product_templates": [{"id": 1, "name": "Simple product"}],
    "stores": [{"id": 1, "name": "Main"}, {"id": 2, "name": "Outlet"}],
    "orders": [
        {
            "id": 1,
            "order_total": "30",
            "billing_address": {"first_name": "Ann", "city": "Oslo"},
            "items": [{"id": 1, "product_id": 10, "product_name": "Widget", "quantity": 2}],
            "shipments": [
                {"id": 2, "created_on_utc": "2024-02-02T00:00:00"},
                {"id": 1, "created_on_utc": "2024-01-01T00:00:00"},
            ],
        },
        {"id": 2},
    ],
    "customers": [
        {"id": 1, "email": "ann@example.com", "roles": ["Registered"], "first_name": "Ann"},
    ],
    "newsletter_subscriptions": [
        {"email": "ann@example.com", "active": True, "store_id": 1},
        {"email": "bob@example.com", "active": False, "store_id": 2},
    ],
    "states": [
        {"country_two_letter_iso_code": "US", "name": "New York", "abbreviation": "NY", "display_order": 1},
    ],
}


@pytest.fixture
def catalog_data():
    return copy.deepcopy(CATALOG)


@pytest.fixture
def store(catalog_data):
    return store_from_mapping(catalog_data)


@pytest.fixture
def settings():
    return ExportSettings()


@pytest.fixture
def advanced_settings():
    return settings_from_mapping({"advanced_mode": True})


@pytest.fixture
def project_files(tmp_path, catalog_data):
    """Config and data files on disk, as the CLI reads them."""
    config_path = tmp_path / "config.json"
    data_path = tmp_path / "catalog.json"
    config_path.write_text(json.dumps({"version": "4.0"}), encoding="utf-8")
    data_path.write_text(json.dumps(catalog_data), encoding="utf-8")
    return config_path, data_path
