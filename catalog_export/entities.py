"""Catalog entities handed to the export engine.

These are plain records; fetching and persisting them is the record-access
layer's job (see ``store.py``). Enumerations double as dropdown domains via
``enum_domain``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import List, Optional, Type

from .descriptors import Domain, make_domain
from .naming import enum_caption


class ProductType(IntEnum):
    SimpleProduct = 5
    GroupedProduct = 10


class GiftCardType(IntEnum):
    Virtual = 0
    Physical = 1


class DownloadActivationType(IntEnum):
    WhenOrderIsPaid = 0
    Manually = 10


class RecurringProductCyclePeriod(IntEnum):
    Days = 0
    Weeks = 10
    Months = 20
    Years = 30


class RentalPricePeriod(IntEnum):
    Days = 0
    Weeks = 10
    Months = 20
    Years = 30


class ManageInventoryMethod(IntEnum):
    DontManageStock = 0
    ManageStock = 1
    ManageStockByAttributes = 2


class LowStockActivity(IntEnum):
    Nothing = 0
    DisableBuyButton = 1
    Unpublish = 2


class BackorderMode(IntEnum):
    NoBackorders = 0
    AllowQtyBelow0 = 1
    AllowQtyBelow0AndNotifyCustomer = 2


class AttributeControlType(IntEnum):
    DropdownList = 1
    RadioList = 2
    Checkboxes = 3
    TextBox = 4
    MultilineTextbox = 10
    Datepicker = 20
    FileUpload = 30
    ColorSquares = 40
    ImageSquares = 45
    ReadonlyCheckboxes = 50


class AttributeValueType(IntEnum):
    Simple = 0
    AssociatedToProduct = 10


def enum_domain(enum_cls: Type[IntEnum]) -> Domain:
    """(code, caption) pairs of an enumeration, in declaration order."""
    return make_domain((member.value, enum_caption(member.name)) for member in enum_cls)


@dataclass
class NamedEntity:
    """Vendors, templates, tax categories, measures, warehouses..."""

    id: int
    name: str
    display_order: int = 0


@dataclass
class Picture:
    id: int
    seo_filename: Optional[str] = None
    mime_type: str = "image/jpeg"


@dataclass
class ProductCategory:
    id: int
    product_id: int
    category_id: int
    is_featured_product: bool = False
    display_order: int = 0


@dataclass
class ProductManufacturer:
    id: int
    product_id: int
    manufacturer_id: int
    is_featured_product: bool = False
    display_order: int = 0


@dataclass
class ProductPicture:
    id: int
    picture_id: int
    display_order: int = 0


@dataclass
class TierPrice:
    id: int
    quantity: int
    price: Decimal
    store_id: int = 0
    customer_role_id: Optional[int] = None


@dataclass
class Discount:
    id: int
    name: str


@dataclass
class ProductTag:
    id: int
    name: str


@dataclass
class ProductSpecificationAttribute:
    id: int
    specification_attribute_option_id: int
    custom_value: Optional[str] = None
    allow_filtering: bool = False
    show_on_product_page: bool = True
    display_order: int = 0


@dataclass
class ProductAttributeValue:
    id: int
    name: str
    attribute_value_type: AttributeValueType = AttributeValueType.Simple
    associated_product_id: int = 0
    color_squares_rgb: Optional[str] = None
    image_squares_picture_id: int = 0
    price_adjustment: Decimal = Decimal("0")
    weight_adjustment: Decimal = Decimal("0")
    cost: Decimal = Decimal("0")
    customer_enters_qty: bool = False
    quantity: int = 0
    is_pre_selected: bool = False
    display_order: int = 0
    picture_id: int = 0


@dataclass
class ProductAttributeMapping:
    id: int
    product_attribute_id: int
    product_attribute_name: str
    text_prompt: Optional[str] = None
    is_required: bool = False
    attribute_control_type: AttributeControlType = AttributeControlType.DropdownList
    display_order: int = 0
    validation_min_length: Optional[int] = None
    validation_max_length: Optional[int] = None
    validation_file_allowed_extensions: Optional[str] = None
    validation_file_maximum_size: Optional[int] = None
    default_value: Optional[str] = None
    condition_attribute_xml: Optional[str] = None
    values: List[ProductAttributeValue] = field(default_factory=list)

    def validation_rules_allowed(self) -> bool:
        return self.attribute_control_type in (
            AttributeControlType.TextBox,
            AttributeControlType.MultilineTextbox,
            AttributeControlType.FileUpload,
        )


@dataclass
class Product:
    id: int
    name: str
    product_type: ProductType = ProductType.SimpleProduct
    parent_grouped_product_id: int = 0
    visible_individually: bool = True
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    admin_comment: Optional[str] = None
    vendor_id: int = 0
    product_template_id: int = 0
    show_on_home_page: bool = False
    meta_keywords: Optional[str] = None
    meta_description: Optional[str] = None
    meta_title: Optional[str] = None
    se_name: Optional[str] = None
    allow_customer_reviews: bool = True
    published: bool = True
    deleted: bool = False
    sku: Optional[str] = None
    manufacturer_part_number: Optional[str] = None
    gtin: Optional[str] = None
    is_gift_card: bool = False
    gift_card_type: GiftCardType = GiftCardType.Virtual
    overridden_gift_card_amount: Optional[Decimal] = None
    require_other_products: bool = False
    required_product_ids: Optional[str] = None
    automatically_add_required_products: bool = False
    is_download: bool = False
    download_id: int = 0
    unlimited_downloads: bool = True
    max_number_of_downloads: int = 0
    download_expiration_days: Optional[int] = None
    download_activation_type: DownloadActivationType = DownloadActivationType.WhenOrderIsPaid
    has_sample_download: bool = False
    sample_download_id: int = 0
    has_user_agreement: bool = False
    user_agreement_text: Optional[str] = None
    is_recurring: bool = False
    recurring_cycle_length: int = 0
    recurring_cycle_period: RecurringProductCyclePeriod = RecurringProductCyclePeriod.Days
    recurring_total_cycles: int = 0
    is_rental: bool = False
    rental_price_length: int = 0
    rental_price_period: RentalPricePeriod = RentalPricePeriod.Days
    is_ship_enabled: bool = True
    is_free_shipping: bool = False
    ship_separately: bool = False
    additional_shipping_charge: Decimal = Decimal("0")
    delivery_date_id: int = 0
    is_tax_exempt: bool = False
    tax_category_id: int = 0
    is_telecommunications_or_broadcasting_or_electronic_services: bool = False
    manage_inventory_method: ManageInventoryMethod = ManageInventoryMethod.DontManageStock
    use_multiple_warehouses: bool = False
    warehouse_id: int = 0
    stock_quantity: int = 0
    display_stock_availability: bool = False
    display_stock_quantity: bool = False
    min_stock_quantity: int = 0
    low_stock_activity: LowStockActivity = LowStockActivity.Nothing
    notify_admin_for_quantity_below: int = 1
    backorder_mode: BackorderMode = BackorderMode.NoBackorders
    allow_back_in_stock_subscriptions: bool = False
    order_minimum_quantity: int = 1
    order_maximum_quantity: int = 10000
    allowed_quantities: Optional[str] = None
    allow_adding_only_existing_attribute_combinations: bool = False
    not_returnable: bool = False
    disable_buy_button: bool = False
    disable_wishlist_button: bool = False
    available_for_pre_order: bool = False
    pre_order_availability_start_date_time_utc: Optional[datetime] = None
    call_for_price: bool = False
    price: Decimal = Decimal("0")
    old_price: Decimal = Decimal("0")
    product_cost: Decimal = Decimal("0")
    special_price: Optional[Decimal] = None
    special_price_start_date_time_utc: Optional[datetime] = None
    special_price_end_date_time_utc: Optional[datetime] = None
    customer_enters_price: bool = False
    minimum_customer_entered_price: Decimal = Decimal("0")
    maximum_customer_entered_price: Decimal = Decimal("0")
    baseprice_enabled: bool = False
    baseprice_amount: Decimal = Decimal("0")
    baseprice_unit_id: int = 0
    baseprice_base_amount: Decimal = Decimal("0")
    baseprice_base_unit_id: int = 0
    mark_as_new: bool = False
    mark_as_new_start_date_time_utc: Optional[datetime] = None
    mark_as_new_end_date_time_utc: Optional[datetime] = None
    weight: Decimal = Decimal("0")
    length: Decimal = Decimal("0")
    width: Decimal = Decimal("0")
    height: Decimal = Decimal("0")
    created_on_utc: Optional[datetime] = None
    updated_on_utc: Optional[datetime] = None
    attribute_mappings: List[ProductAttributeMapping] = field(default_factory=list)
    pictures: List[ProductPicture] = field(default_factory=list)
    tier_prices: List[TierPrice] = field(default_factory=list)
    discounts: List[Discount] = field(default_factory=list)
    tags: List[ProductTag] = field(default_factory=list)
    specification_attributes: List[ProductSpecificationAttribute] = field(default_factory=list)


@dataclass
class Category:
    id: int
    name: str
    parent_category_id: Optional[int] = None
    description: Optional[str] = None
    category_template_id: int = 0
    meta_keywords: Optional[str] = None
    meta_description: Optional[str] = None
    meta_title: Optional[str] = None
    se_name: Optional[str] = None
    picture_id: int = 0
    page_size: int = 6
    allow_customers_to_select_page_size: bool = True
    page_size_options: Optional[str] = None
    price_ranges: Optional[str] = None
    show_on_home_page: bool = False
    include_in_top_menu: bool = False
    published: bool = True
    deleted: bool = False
    display_order: int = 0
    created_on_utc: Optional[datetime] = None
    updated_on_utc: Optional[datetime] = None


@dataclass
class Manufacturer:
    id: int
    name: str
    description: Optional[str] = None
    manufacturer_template_id: int = 0
    meta_keywords: Optional[str] = None
    meta_description: Optional[str] = None
    meta_title: Optional[str] = None
    se_name: Optional[str] = None
    picture_id: int = 0
    page_size: int = 6
    allow_customers_to_select_page_size: bool = True
    page_size_options: Optional[str] = None
    price_ranges: Optional[str] = None
    published: bool = True
    deleted: bool = False
    display_order: int = 0
    created_on_utc: Optional[datetime] = None
    updated_on_utc: Optional[datetime] = None


@dataclass
class Address:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    country: Optional[str] = None
    state_province: Optional[str] = None
    city: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    zip_postal_code: Optional[str] = None
    phone_number: Optional[str] = None
    fax_number: Optional[str] = None


@dataclass
class OrderItem:
    id: int
    product_id: int
    product_name: Optional[str] = None
    order_item_guid: Optional[str] = None
    sku: Optional[str] = None
    price_excl_tax: Decimal = Decimal("0")
    price_incl_tax: Decimal = Decimal("0")
    quantity: int = 1
    discount_excl_tax: Decimal = Decimal("0")
    discount_incl_tax: Decimal = Decimal("0")
    total_excl_tax: Decimal = Decimal("0")
    total_incl_tax: Decimal = Decimal("0")
    rental_start_date_utc: Optional[datetime] = None
    rental_end_date_utc: Optional[datetime] = None


@dataclass
class Shipment:
    id: int
    tracking_number: Optional[str] = None
    total_weight: Optional[Decimal] = None
    shipped_date_utc: Optional[datetime] = None
    delivery_date_utc: Optional[datetime] = None
    created_on_utc: Optional[datetime] = None


@dataclass
class Order:
    id: int
    order_guid: Optional[str] = None
    store_id: int = 0
    customer_id: int = 0
    order_status_id: int = 10
    payment_status_id: int = 10
    shipping_status_id: int = 10
    order_subtotal_incl_tax: Decimal = Decimal("0")
    order_subtotal_excl_tax: Decimal = Decimal("0")
    order_shipping_incl_tax: Decimal = Decimal("0")
    order_shipping_excl_tax: Decimal = Decimal("0")
    tax_rates: Optional[str] = None
    order_tax: Decimal = Decimal("0")
    order_total: Decimal = Decimal("0")
    refunded_amount: Decimal = Decimal("0")
    order_discount: Decimal = Decimal("0")
    currency_rate: Decimal = Decimal("1")
    customer_currency_code: Optional[str] = None
    affiliate_id: int = 0
    payment_method_system_name: Optional[str] = None
    pick_up_in_store: bool = False
    shipping_method: Optional[str] = None
    shipping_rate_computation_method_system_name: Optional[str] = None
    custom_values_xml: Optional[str] = None
    vat_number: Optional[str] = None
    deleted: bool = False
    created_on_utc: Optional[datetime] = None
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    items: List[OrderItem] = field(default_factory=list)
    shipments: List[Shipment] = field(default_factory=list)


@dataclass
class Customer:
    id: int
    customer_guid: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    password_format_id: int = 0
    password_salt: Optional[str] = None
    is_tax_exempt: bool = False
    affiliate_id: int = 0
    vendor_id: int = 0
    active: bool = True
    roles: List[str] = field(default_factory=list)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    company: Optional[str] = None
    street_address: Optional[str] = None
    street_address2: Optional[str] = None
    zip_postal_code: Optional[str] = None
    city: Optional[str] = None
    country_id: int = 0
    state_province_id: int = 0
    phone: Optional[str] = None
    fax: Optional[str] = None
    vat_number: Optional[str] = None
    time_zone_id: Optional[str] = None
    created_on_utc: Optional[datetime] = None

    def is_in_role(self, role: str) -> bool:
        return role in self.roles


@dataclass
class NewsLetterSubscription:
    email: str
    active: bool = True
    store_id: int = 0


@dataclass
class StateProvince:
    country_two_letter_iso_code: str
    name: str
    abbreviation: Optional[str] = None
    published: bool = True
    display_order: int = 0


@dataclass
class ExportProductAttribute:
    """One attribute row under a product in the spreadsheet export.

    Value-level fields stay None for a mapping that has no values.
    """

    attribute_id: int
    attribute_name: str
    attribute_text_prompt: Optional[str] = None
    attribute_is_required: bool = False
    attribute_control_type: AttributeControlType = AttributeControlType.DropdownList
    attribute_display_order: Optional[int] = None
    id: Optional[int] = None
    name: Optional[str] = None
    attribute_value_type: Optional[AttributeValueType] = None
    associated_product_id: Optional[int] = None
    color_squares_rgb: Optional[str] = None
    image_squares_picture_id: Optional[int] = None
    price_adjustment: Optional[Decimal] = None
    weight_adjustment: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    customer_enters_qty: Optional[bool] = None
    quantity: Optional[int] = None
    is_pre_selected: Optional[bool] = None
    display_order: Optional[int] = None
    picture_id: Optional[int] = None


def export_attribute_rows(product: Product) -> List[ExportProductAttribute]:
    """Flatten a product's attribute mappings into detail rows.

    Mappings with values yield one row per value; mappings without values
    follow with a single attribute-level row each.
    """
    rows: List[ExportProductAttribute] = []
    bare: List[ProductAttributeMapping] = []
    for mapping in product.attribute_mappings:
        if not mapping.values:
            bare.append(mapping)
            continue
        for value in mapping.values:
            rows.append(
                ExportProductAttribute(
                    attribute_id=mapping.product_attribute_id,
                    attribute_name=mapping.product_attribute_name,
                    attribute_text_prompt=mapping.text_prompt,
                    attribute_is_required=mapping.is_required,
                    attribute_control_type=mapping.attribute_control_type,
                    attribute_display_order=mapping.display_order,
                    id=value.id,
                    name=value.name,
                    attribute_value_type=value.attribute_value_type,
                    associated_product_id=value.associated_product_id,
                    color_squares_rgb=value.color_squares_rgb,
                    image_squares_picture_id=value.image_squares_picture_id,
                    price_adjustment=value.price_adjustment,
                    weight_adjustment=value.weight_adjustment,
                    cost=value.cost,
                    customer_enters_qty=value.customer_enters_qty,
                    quantity=value.quantity,
                    is_pre_selected=value.is_pre_selected,
                    display_order=value.display_order,
                    picture_id=value.picture_id,
                )
            )
    for mapping in bare:
        rows.append(
            ExportProductAttribute(
                attribute_id=mapping.product_attribute_id,
                attribute_name=mapping.product_attribute_name,
                attribute_text_prompt=mapping.text_prompt,
                attribute_is_required=mapping.is_required,
                attribute_control_type=mapping.attribute_control_type,
            )
        )
    return rows
