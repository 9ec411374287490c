"""Per-entity export operations.

Each operation picks a field list, resolves it against the settings once,
and hands records to one of the generic writers:

- ``*_xlsx`` return a ``TabularDocument`` (encode with ``xlsx.save``)
- ``*_xml`` return an lxml root element (encode with ``markup.to_bytes``)
- ``*_txt`` return comma-separated text

``records`` defaults to everything the store holds for that entity.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from lxml import etree

from . import catalog_fields as cf
from .descriptors import ConditionalFieldPolicy, FieldDescriptor
from .document import TabularDocument
from .entities import (
    Category,
    Customer,
    Manufacturer,
    NewsLetterSubscription,
    Order,
    Product,
    StateProvince,
    export_attribute_rows,
)
from .master_detail import MasterDetailBlockWriter
from .settings import ExportSettings
from .store import CatalogStore
from .tabular import TabularDocumentWriter
from .tree import HierarchicalTreeSerializer, LeafGroup
from .values import to_text

logger = logging.getLogger(__name__)


def _display_order(node: Any) -> Any:
    return (node.display_order, node.id)


class ExportFacade:
    """Export entry points for one store and one set of settings."""

    def __init__(self, store: CatalogStore, settings: ExportSettings):
        self.store = store
        self.settings = settings
        self.policy = ConditionalFieldPolicy(settings.mode_flags())

    def _resolve(self, descriptors: Sequence[FieldDescriptor[Any]]) -> Tuple[FieldDescriptor[Any], ...]:
        return self.policy.resolve(descriptors)

    def _tabular_writer(self) -> TabularDocumentWriter:
        return TabularDocumentWriter(use_dropdown_lists=self.settings.use_dropdown_lists)

    # Manufacturers

    def export_manufacturers_xlsx(self, manufacturers: Optional[Iterable[Manufacturer]] = None) -> TabularDocument:
        records = self.store.manufacturers if manufacturers is None else manufacturers
        fields = self._resolve(cf.manufacturer_fields(self.store))
        return self._tabular_writer().write(Manufacturer, fields, records)

    def export_manufacturers_xml(self, manufacturers: Optional[Iterable[Manufacturer]] = None) -> etree._Element:
        records = self.store.manufacturers if manufacturers is None else manufacturers
        products = LeafGroup(
            tag="Products",
            item_tag="ProductManufacturer",
            fields=cf.product_manufacturer_leaf_fields(self.store),
            items=lambda m: self.store.product_manufacturers_by_manufacturer(m.id),
            skip=lambda pm: self.store.product_is_gone(pm.product_id),
        )
        serializer = HierarchicalTreeSerializer(
            element_tag="Manufacturer",
            fields=cf.manufacturer_element_fields(),
            id_of=lambda m: m.id,
            leaf_groups=[products],
        )
        return serializer.serialize(records, root_tag="Manufacturers", version=self.settings.version)

    # Categories

    def export_categories_xlsx(self, categories: Optional[Iterable[Category]] = None) -> TabularDocument:
        records = self.store.categories if categories is None else categories
        fields = self._resolve(cf.category_fields(self.store))
        return self._tabular_writer().write(Category, fields, records)

    def export_categories_xml(self, categories: Optional[Iterable[Category]] = None) -> etree._Element:
        """Category forest: every category nested under its parent."""
        records = self.store.categories if categories is None else categories
        products = LeafGroup(
            tag="Products",
            item_tag="ProductCategory",
            fields=cf.product_category_leaf_fields(self.store),
            items=lambda c: self.store.product_categories_by_category(c.id),
            skip=lambda pc: self.store.product_is_gone(pc.product_id),
        )
        serializer = HierarchicalTreeSerializer(
            element_tag="Category",
            fields=cf.category_element_fields(),
            id_of=lambda c: c.id,
            parent_of=lambda c: c.parent_category_id,
            leaf_groups=[products],
            children_tag="SubCategories",
            sort_key=_display_order,
        )
        return serializer.serialize(records, root_tag="Categories", version=self.settings.version)

    # Products

    def export_products_xlsx(self, products: Optional[Iterable[Product]] = None) -> TabularDocument:
        """Product sheet; attribute blocks follow each product when enabled."""
        records = self.store.products if products is None else products
        fields = self._resolve(cf.product_fields(self.store))
        if not self.settings.attribute_blocks_enabled():
            return self._tabular_writer().write(Product, fields, records)
        writer = MasterDetailBlockWriter(
            cf.product_attribute_fields(),
            export_attribute_rows,
            detail_name="ProductAttributes",
            use_dropdown_lists=self.settings.use_dropdown_lists,
        )
        return writer.write(Product, fields, records)

    def _product_groups(self) -> List[LeafGroup]:
        store = self.store
        values = LeafGroup(
            tag="ProductAttributeValues",
            item_tag="ProductAttributeValue",
            fields=cf.attribute_value_fields(),
            items=lambda mapping: mapping.values,
        )
        candidates = [
            (
                "discounts",
                LeafGroup("ProductDiscounts", "Discount", cf.discount_fields(), lambda p: p.discounts),
            ),
            (
                "tier_prices",
                LeafGroup("TierPrices", "TierPrice", cf.tier_price_fields(), lambda p: p.tier_prices),
            ),
            (
                "product_attributes",
                LeafGroup(
                    "ProductAttributes",
                    "ProductAttributeMapping",
                    cf.attribute_mapping_fields(),
                    lambda p: sorted(p.attribute_mappings, key=_display_order),
                    groups=[values],
                ),
            ),
            (
                None,
                LeafGroup(
                    "ProductPictures",
                    "ProductPicture",
                    cf.product_picture_fields(),
                    lambda p: sorted(p.pictures, key=_display_order),
                ),
            ),
            (
                None,
                LeafGroup(
                    "ProductCategories",
                    "ProductCategory",
                    cf.product_category_fields(),
                    lambda p: store.product_categories_by_product(p.id),
                ),
            ),
            (
                "manufacturers",
                LeafGroup(
                    "ProductManufacturers",
                    "ProductManufacturer",
                    cf.product_manufacturer_fields(),
                    lambda p: store.product_manufacturers_by_product(p.id),
                ),
            ),
            (
                "specification_attributes",
                LeafGroup(
                    "ProductSpecificationAttributes",
                    "ProductSpecificationAttribute",
                    cf.specification_attribute_fields(),
                    lambda p: p.specification_attributes,
                ),
            ),
            (
                "product_tags",
                LeafGroup("ProductTags", "ProductTag", cf.product_tag_fields(), lambda p: p.tags),
            ),
        ]
        return [group for toggle, group in candidates if self.policy.includes_group(toggle)]

    def export_products_xml(self, products: Optional[Iterable[Product]] = None) -> etree._Element:
        records = self.store.products if products is None else products
        serializer = HierarchicalTreeSerializer(
            element_tag="Product",
            fields=self._resolve(cf.product_element_fields()),
            id_of=lambda p: p.id,
            leaf_groups=self._product_groups(),
        )
        return serializer.serialize(records, root_tag="Products", version=self.settings.version)

    # Orders

    def export_orders_xlsx(self, orders: Optional[Iterable[Order]] = None) -> TabularDocument:
        records = self.store.orders if orders is None else orders
        fields = self._resolve(cf.order_fields())
        return self._tabular_writer().write(Order, fields, records)

    def export_orders_xml(self, orders: Optional[Iterable[Order]] = None) -> etree._Element:
        records = self.store.orders if orders is None else orders
        items = LeafGroup(
            tag="OrderItems",
            item_tag="OrderItem",
            fields=cf.order_item_fields(),
            items=lambda o: o.items,
            omit_empty=True,
        )
        shipments = LeafGroup(
            tag="Shipments",
            item_tag="Shipment",
            fields=cf.shipment_fields(),
            items=lambda o: sorted(o.shipments, key=_created_on),
            omit_empty=True,
        )
        serializer = HierarchicalTreeSerializer(
            element_tag="Order",
            fields=cf.order_element_fields(),
            id_of=lambda o: o.id,
            leaf_groups=[items, shipments],
        )
        return serializer.serialize(records, root_tag="Orders", version=self.settings.version)

    # Customers

    def export_customers_xlsx(self, customers: Optional[Iterable[Customer]] = None) -> TabularDocument:
        records = self.store.customers if customers is None else customers
        fields = self._resolve(cf.customer_fields())
        return self._tabular_writer().write(Customer, fields, records)

    def export_customers_xml(self, customers: Optional[Iterable[Customer]] = None) -> etree._Element:
        records = self.store.customers if customers is None else customers
        serializer = HierarchicalTreeSerializer(
            element_tag="Customer",
            fields=cf.customer_element_fields(self.store),
            id_of=lambda c: c.id,
        )
        return serializer.serialize(records, root_tag="Customers", version=self.settings.version)

    # Plain text

    def export_newsletter_subscribers_txt(
        self, subscriptions: Optional[Iterable[NewsLetterSubscription]] = None
    ) -> str:
        """One ``email,active,store_id`` line per subscription."""
        records = self.store.newsletter_subscriptions if subscriptions is None else subscriptions
        return _csv_lines([s.email, s.active, s.store_id] for s in records)

    def export_states_txt(self, states: Optional[Iterable[StateProvince]] = None) -> str:
        """One ``country,name,abbreviation,published,display_order`` line per state."""
        records = self.store.states if states is None else states
        return _csv_lines(
            [s.country_two_letter_iso_code, s.name, s.abbreviation, s.published, s.display_order]
            for s in records
        )


def _created_on(shipment: Any) -> Any:
    # Shipments without a timestamp sort first.
    return (shipment.created_on_utc is not None, shipment.created_on_utc or 0, shipment.id)


def _csv_lines(rows: Iterable[List[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    count = 0
    for row in rows:
        writer.writerow([to_text(value) for value in row])
        count += 1
    logger.info("Wrote %d text lines", count)
    return buffer.getvalue()
