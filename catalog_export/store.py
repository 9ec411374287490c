"""In-memory record access for the export engine.

Loads catalog data from a JSON document and answers the lookups the
exports need: related collections by id, related-entity lists for dropdown
domains, and picture thumbnail paths.

Input format (every key optional; field names follow the entity
dataclasses):

    {
      "categories": [...], "manufacturers": [...], "products": [...],
      "product_categories": [...], "product_manufacturers": [...],
      "pictures": [...], "vendors": [...], "product_templates": [...],
      "tax_categories": [...], "delivery_dates": [...], "warehouses": [...],
      "measure_weights": [...], "stores": [...], "orders": [...],
      "customers": [...], "newsletter_subscriptions": [...],
      "states": [...]
    }
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from .entities import (
    Category,
    Customer,
    Manufacturer,
    NamedEntity,
    NewsLetterSubscription,
    Order,
    Picture,
    Product,
    ProductCategory,
    ProductManufacturer,
    StateProvince,
)
from .errors import DataIntegrityError, ExportError
from .fileio import read_json

logger = logging.getLogger(__name__)

E = TypeVar("E")

DEFAULT_PICTURE_BASE_PATH = "images/thumbs"

_MIME_EXTENSIONS = {
    "pjpeg": "jpg",
    "x-png": "png",
    "x-icon": "ico",
}


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _validate(target: Any, raw: Any, kind: str) -> Any:
    # Strict JSON mode: ints must be ints and booleans must be true/false,
    # while decimals, timestamps and enum codes still come from JSON values.
    try:
        payload = json.dumps(raw)
    except (TypeError, ValueError) as exc:
        raise DataIntegrityError(f"Invalid {kind} data: {exc}") from exc
    try:
        return _adapter(target).validate_json(payload, strict=True)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"]) or kind
        raise DataIntegrityError(
            f"Invalid {kind} record at {where}: {first['msg']} "
            f"({exc.error_count()} error(s))"
        ) from exc


def build(cls: Type[E], raw: Dict[str, Any]) -> E:
    """Build one entity from its JSON object.

    Unknown keys are ignored; bad values raise ``DataIntegrityError``.
    """
    return _validate(cls, raw, cls.__name__)


def build_all(cls: Type[E], items: Optional[Iterable[Dict[str, Any]]]) -> List[E]:
    if items is None:
        return []
    return _validate(List[cls], items, cls.__name__)


def _by_id(items: Iterable[Any], kind: str) -> Dict[int, Any]:
    index: Dict[int, Any] = {}
    for item in items:
        if item.id in index:
            raise DataIntegrityError(f"Duplicate {kind} id: {item.id}")
        index[item.id] = item
    return index


def _group(items: Iterable[Any], key: str) -> Dict[int, List[Any]]:
    grouped: Dict[int, List[Any]] = {}
    for item in items:
        grouped.setdefault(getattr(item, key), []).append(item)
    for bucket in grouped.values():
        bucket.sort(key=lambda link: (link.display_order, link.id))
    return grouped


class CatalogStore:
    """Read-only record access over already loaded entities.

    All related-collection indexes are built once in the constructor.
    """

    def __init__(
        self,
        *,
        categories: Sequence[Category] = (),
        manufacturers: Sequence[Manufacturer] = (),
        products: Sequence[Product] = (),
        product_categories: Sequence[ProductCategory] = (),
        product_manufacturers: Sequence[ProductManufacturer] = (),
        pictures: Sequence[Picture] = (),
        vendors: Sequence[NamedEntity] = (),
        product_templates: Sequence[NamedEntity] = (),
        tax_categories: Sequence[NamedEntity] = (),
        delivery_dates: Sequence[NamedEntity] = (),
        warehouses: Sequence[NamedEntity] = (),
        measure_weights: Sequence[NamedEntity] = (),
        stores: Sequence[NamedEntity] = (),
        orders: Sequence[Order] = (),
        customers: Sequence[Customer] = (),
        newsletter_subscriptions: Sequence[NewsLetterSubscription] = (),
        states: Sequence[StateProvince] = (),
        picture_base_path: str = DEFAULT_PICTURE_BASE_PATH,
    ):
        self.categories = list(categories)
        self.manufacturers = list(manufacturers)
        self.products = list(products)
        self.vendors = list(vendors)
        self.product_templates = list(product_templates)
        self.tax_categories = list(tax_categories)
        self.delivery_dates = list(delivery_dates)
        self.warehouses = list(warehouses)
        self.measure_weights = list(measure_weights)
        self.stores = list(stores)
        self.orders = list(orders)
        self.customers = list(customers)
        self.newsletter_subscriptions = list(newsletter_subscriptions)
        self.states = list(states)
        self.picture_base_path = picture_base_path

        self._categories = _by_id(self.categories, "category")
        self._manufacturers = _by_id(self.manufacturers, "manufacturer")
        self._products = _by_id(self.products, "product")
        self._pictures = _by_id(pictures, "picture")

        links_c = list(product_categories)
        links_m = list(product_manufacturers)
        self._pc_by_category = _group(links_c, "category_id")
        self._pc_by_product = _group(links_c, "product_id")
        self._pm_by_manufacturer = _group(links_m, "manufacturer_id")
        self._pm_by_product = _group(links_m, "product_id")

        self._subscriptions = {
            (s.email.lower(), s.store_id): s for s in self.newsletter_subscriptions
        }

    # Lookups

    def product(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def category(self, category_id: int) -> Optional[Category]:
        return self._categories.get(category_id)

    def manufacturer(self, manufacturer_id: int) -> Optional[Manufacturer]:
        return self._manufacturers.get(manufacturer_id)

    def picture(self, picture_id: int) -> Optional[Picture]:
        return self._pictures.get(picture_id)

    def product_is_gone(self, product_id: int) -> bool:
        """True when the product is missing or marked deleted."""
        product = self.product(product_id)
        return product is None or product.deleted

    def product_categories_by_category(self, category_id: int) -> List[ProductCategory]:
        return list(self._pc_by_category.get(category_id, []))

    def product_categories_by_product(self, product_id: int) -> List[ProductCategory]:
        return list(self._pc_by_product.get(product_id, []))

    def product_manufacturers_by_manufacturer(self, manufacturer_id: int) -> List[ProductManufacturer]:
        return list(self._pm_by_manufacturer.get(manufacturer_id, []))

    def product_manufacturers_by_product(self, product_id: int) -> List[ProductManufacturer]:
        return list(self._pm_by_product.get(product_id, []))

    def pictures_for_product(self, product: Product, limit: Optional[int] = None) -> List[Picture]:
        ordered = sorted(product.pictures, key=lambda pp: (pp.display_order, pp.id))
        found = [self._pictures[pp.picture_id] for pp in ordered if pp.picture_id in self._pictures]
        return found if limit is None else found[:limit]

    def newsletter_active(self, email: Optional[str], store_id: int) -> bool:
        if not email:
            return False
        subscription = self._subscriptions.get((email.lower(), store_id))
        return subscription is not None and subscription.active

    def thumb_path(self, picture: Optional[Picture]) -> Optional[str]:
        """Local thumbnail path of a picture: ``<base>/<0000042>_<seo>.<ext>``."""
        if picture is None:
            return None
        subtype = picture.mime_type.split("/")[-1].lower()
        extension = _MIME_EXTENSIONS.get(subtype, subtype)
        stem = f"{picture.id:07d}"
        if picture.seo_filename:
            stem = f"{stem}_{picture.seo_filename}"
        return f"{self.picture_base_path.rstrip('/')}/{stem}.{extension}"

    def thumb_path_by_id(self, picture_id: int) -> Optional[str]:
        return self.thumb_path(self.picture(picture_id))


def store_from_mapping(data: Dict[str, Any], *, picture_base_path: str = DEFAULT_PICTURE_BASE_PATH) -> CatalogStore:
    """Build a ``CatalogStore`` from a decoded JSON document."""
    store = CatalogStore(
        categories=build_all(Category, data.get("categories")),
        manufacturers=build_all(Manufacturer, data.get("manufacturers")),
        products=build_all(Product, data.get("products")),
        product_categories=build_all(ProductCategory, data.get("product_categories")),
        product_manufacturers=build_all(ProductManufacturer, data.get("product_manufacturers")),
        pictures=build_all(Picture, data.get("pictures")),
        vendors=build_all(NamedEntity, data.get("vendors")),
        product_templates=build_all(NamedEntity, data.get("product_templates")),
        tax_categories=build_all(NamedEntity, data.get("tax_categories")),
        delivery_dates=build_all(NamedEntity, data.get("delivery_dates")),
        warehouses=build_all(NamedEntity, data.get("warehouses")),
        measure_weights=build_all(NamedEntity, data.get("measure_weights")),
        stores=build_all(NamedEntity, data.get("stores")),
        orders=build_all(Order, data.get("orders")),
        customers=build_all(Customer, data.get("customers")),
        newsletter_subscriptions=build_all(NewsLetterSubscription, data.get("newsletter_subscriptions")),
        states=build_all(StateProvince, data.get("states")),
        picture_base_path=picture_base_path,
    )
    logger.info(
        "Loaded %d products, %d categories, %d manufacturers, %d orders, %d customers",
        len(store.products),
        len(store.categories),
        len(store.manufacturers),
        len(store.orders),
        len(store.customers),
    )
    return store


def load_store(data_path: str, *, picture_base_path: str = DEFAULT_PICTURE_BASE_PATH) -> CatalogStore:
    """Load catalog data from ``data_path``.

    Raises ``ExportError`` if the file is missing or invalid.
    """
    data = read_json(data_path)
    if not isinstance(data, dict):
        raise ExportError(f"Missing or invalid data file: {data_path}")
    return store_from_mapping(data, picture_base_path=picture_base_path)
