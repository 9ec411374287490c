"""Export settings.

Settings are read once from ``config/config.json`` and passed explicitly
into the facade; nothing in the engine reads them from process state.

Example:

    {
      "version": "4.0",
      "advanced_mode": false,
      "use_dropdown_lists": true,
      "export_product_attributes": true,
      "picture_base_path": "images/thumbs",
      "product_editor": {"seo": true, "tier_prices": false}
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .descriptors import ModeFlags
from .errors import ConfigurationError
from .fileio import read_json
from .store import DEFAULT_PICTURE_BASE_PATH

CONFIG_PATH = "config/config.json"
DEFAULT_VERSION = "1.0"

# Per-field product editor toggles and their defaults. A product field gated
# by a toggle is exported in basic mode only when its toggle is on.
PRODUCT_EDITOR_DEFAULTS: Dict[str, bool] = {
    "id": True,
    "product_type": True,
    "visible_individually": True,
    "admin_comment": False,
    "vendor": False,
    "product_template": True,
    "show_on_home_page": True,
    "seo": True,
    "allow_customer_reviews": True,
    "published": True,
    "manufacturer_part_number": False,
    "gtin": False,
    "is_gift_card": True,
    "require_other_products": False,
    "downloadable_product": True,
    "recurring_product": False,
    "is_rental": False,
    "free_shipping": True,
    "ship_separately": False,
    "additional_shipping_charge": False,
    "delivery_date": False,
    "telecommunications_services": False,
    "use_multiple_warehouses": False,
    "warehouse": False,
    "display_stock_availability": True,
    "display_stock_quantity": True,
    "minimum_stock_quantity": False,
    "low_stock_activity": False,
    "notify_admin_for_quantity_below": False,
    "backorders": False,
    "allow_back_in_stock_subscriptions": False,
    "minimum_cart_quantity": False,
    "maximum_cart_quantity": False,
    "allowed_quantities": False,
    "allow_adding_only_existing_attribute_combinations": False,
    "not_returnable": False,
    "disable_buy_button": False,
    "disable_wishlist_button": False,
    "available_for_pre_order": False,
    "call_for_price": False,
    "old_price": True,
    "product_cost": True,
    "special_price": False,
    "special_price_start_date": False,
    "special_price_end_date": False,
    "customer_enters_price": False,
    "base_price": False,
    "mark_as_new": True,
    "mark_as_new_start_date": False,
    "mark_as_new_end_date": False,
    "weight": True,
    "dimensions": True,
    "created_on": False,
    "updated_on": False,
    "manufacturers": True,
    "product_tags": True,
    "discounts": False,
    "tier_prices": False,
    "product_attributes": True,
    "specification_attributes": True,
}


def _flag(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"Config key {key!r} must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class ExportSettings:
    """Immutable settings for one or more export calls."""

    advanced_mode: bool = False
    toggles: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType(dict(PRODUCT_EDITOR_DEFAULTS))
    )
    use_dropdown_lists: bool = True
    export_product_attributes: bool = True
    version: str = DEFAULT_VERSION
    picture_base_path: str = DEFAULT_PICTURE_BASE_PATH

    def mode_flags(self) -> ModeFlags:
        return ModeFlags(advanced_mode=self.advanced_mode, toggles=self.toggles)

    def attribute_blocks_enabled(self) -> bool:
        """Whether product spreadsheets carry attribute master/detail blocks."""
        if not self.export_product_attributes:
            return False
        return self.mode_flags().enabled("product_attributes") or self.advanced_mode


def settings_from_mapping(data: Mapping[str, Any]) -> ExportSettings:
    """Validate a decoded config document and freeze it into ``ExportSettings``."""
    editor = data.get("product_editor", {})
    if not isinstance(editor, dict):
        raise ConfigurationError("Config key 'product_editor' must be an object")

    toggles = dict(PRODUCT_EDITOR_DEFAULTS)
    for name, value in editor.items():
        if name not in PRODUCT_EDITOR_DEFAULTS:
            raise ConfigurationError(f"Unknown product editor toggle: {name!r}")
        if not isinstance(value, bool):
            raise ConfigurationError(f"Toggle {name!r} must be true or false, got {value!r}")
        toggles[name] = value

    version = data.get("version", DEFAULT_VERSION)
    picture_base_path = data.get("picture_base_path", DEFAULT_PICTURE_BASE_PATH)
    if not isinstance(version, str) or not isinstance(picture_base_path, str):
        raise ConfigurationError("Config keys 'version' and 'picture_base_path' must be strings")

    return ExportSettings(
        advanced_mode=_flag(data, "advanced_mode", False),
        toggles=MappingProxyType(toggles),
        use_dropdown_lists=_flag(data, "use_dropdown_lists", True),
        export_product_attributes=_flag(data, "export_product_attributes", True),
        version=version,
        picture_base_path=picture_base_path,
    )


def load_settings(config_path: str = CONFIG_PATH) -> ExportSettings:
    """Load settings from ``config_path``.

    Raises ``ConfigurationError`` if the file is missing or invalid.
    """
    data = read_json(config_path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Missing or invalid config: {config_path}")
    return settings_from_mapping(data)
