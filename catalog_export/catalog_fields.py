"""Per-entity field lists.

Every export is driven by one of these lists; the writers never know which
entity they are writing. Spreadsheet lists use human column names, markup
lists use element tags. Toggle names refer to ``PRODUCT_EDITOR_DEFAULTS``.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Any, Callable, List, Optional, Sequence, Union

from .descriptors import Domain, FieldDescriptor, make_domain
from .entities import (
    AttributeControlType,
    AttributeValueType,
    BackorderMode,
    Customer,
    DownloadActivationType,
    GiftCardType,
    LowStockActivity,
    ManageInventoryMethod,
    NamedEntity,
    Order,
    Product,
    ProductAttributeMapping,
    ProductType,
    RecurringProductCyclePeriod,
    RentalPricePeriod,
    enum_domain,
)
from .store import CatalogStore

Accessor = Union[str, Callable[[Any], Any]]

# Detail block columns start this many columns right of the master columns.
ATTRIBUTE_BLOCK_OFFSET = 2

PICTURES_PER_PRODUCT = 3

CUSTOMER_ROLE_COLUMNS = (
    ("IsGuest", "Guests"),
    ("IsRegistered", "Registered"),
    ("IsAdministrator", "Administrators"),
    ("IsForumModerator", "ForumModerators"),
)


def f(name: str, accessor: Accessor, toggle: Optional[str] = None, **options: Any) -> FieldDescriptor[Any]:
    """Descriptor shorthand; a string accessor reads that attribute."""
    getter = attrgetter(accessor) if isinstance(accessor, str) else accessor
    return FieldDescriptor(name=name, accessor=getter, toggle=toggle, **options)


def entity_domain(entities: Sequence[NamedEntity]) -> Domain:
    """(id, name) pairs of related entities, in display order."""
    ordered = sorted(entities, key=lambda e: (e.display_order, e.id))
    return make_domain((e.id, e.name) for e in ordered)


def joined_names(names: Sequence[Optional[str]]) -> Optional[str]:
    """``;``-joined names, or None when there are none."""
    present = [name for name in names if name]
    return ";".join(present) if present else None


# Manufacturers


def manufacturer_fields(store: CatalogStore) -> List[FieldDescriptor[Any]]:
    return [
        f("Id", "id"),
        f("Name", "name"),
        f("Description", "description"),
        f("ManufacturerTemplateId", "manufacturer_template_id"),
        f("MetaKeywords", "meta_keywords"),
        f("MetaDescription", "meta_description"),
        f("MetaTitle", "meta_title"),
        f("SeName", "se_name"),
        f("Picture", lambda m: store.thumb_path_by_id(m.picture_id)),
        f("PageSize", "page_size"),
        f("AllowCustomersToSelectPageSize", "allow_customers_to_select_page_size"),
        f("PageSizeOptions", "page_size_options"),
        f("PriceRanges", "price_ranges"),
        f("Published", "published"),
        f("DisplayOrder", "display_order"),
    ]


def manufacturer_element_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ManufacturerId", "id"),
        f("Name", "name"),
        f("Description", "description"),
        f("ManufacturerTemplateId", "manufacturer_template_id"),
        f("MetaKeywords", "meta_keywords"),
        f("MetaDescription", "meta_description"),
        f("MetaTitle", "meta_title"),
        f("SEName", "se_name"),
        f("PictureId", "picture_id"),
        f("PageSize", "page_size"),
        f("AllowCustomersToSelectPageSize", "allow_customers_to_select_page_size"),
        f("PageSizeOptions", "page_size_options"),
        f("PriceRanges", "price_ranges"),
        f("Published", "published"),
        f("Deleted", "deleted"),
        f("DisplayOrder", "display_order"),
        f("CreatedOnUtc", "created_on_utc"),
        f("UpdatedOnUtc", "updated_on_utc"),
    ]


def product_manufacturer_leaf_fields(store: CatalogStore) -> List[FieldDescriptor[Any]]:
    return [
        f("ProductManufacturerId", "id"),
        f("ProductId", "product_id"),
        f("ProductName", lambda pm: store.product(pm.product_id).name),
        f("IsFeaturedProduct", "is_featured_product"),
        f("DisplayOrder", "display_order"),
    ]


# Categories


def category_fields(store: CatalogStore) -> List[FieldDescriptor[Any]]:
    return [
        f("Id", "id"),
        f("Name", "name"),
        f("Description", "description"),
        f("CategoryTemplateId", "category_template_id"),
        f("MetaKeywords", "meta_keywords"),
        f("MetaDescription", "meta_description"),
        f("MetaTitle", "meta_title"),
        f("SeName", "se_name"),
        f("ParentCategoryId", "parent_category_id"),
        f("Picture", lambda c: store.thumb_path_by_id(c.picture_id)),
        f("PageSize", "page_size"),
        f("AllowCustomersToSelectPageSize", "allow_customers_to_select_page_size"),
        f("PageSizeOptions", "page_size_options"),
        f("PriceRanges", "price_ranges"),
        f("ShowOnHomePage", "show_on_home_page"),
        f("IncludeInTopMenu", "include_in_top_menu"),
        f("Published", "published"),
        f("DisplayOrder", "display_order"),
    ]


def category_element_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("Id", "id"),
        f("Name", "name"),
        f("Description", "description"),
        f("CategoryTemplateId", "category_template_id"),
        f("MetaKeywords", "meta_keywords"),
        f("MetaDescription", "meta_description"),
        f("MetaTitle", "meta_title"),
        f("SeName", "se_name"),
        f("ParentCategoryId", "parent_category_id"),
        f("PictureId", "picture_id"),
        f("PageSize", "page_size"),
        f("AllowCustomersToSelectPageSize", "allow_customers_to_select_page_size"),
        f("PageSizeOptions", "page_size_options"),
        f("PriceRanges", "price_ranges"),
        f("ShowOnHomePage", "show_on_home_page"),
        f("IncludeInTopMenu", "include_in_top_menu"),
        f("Published", "published"),
        f("Deleted", "deleted"),
        f("DisplayOrder", "display_order"),
        f("CreatedOnUtc", "created_on_utc"),
        f("UpdatedOnUtc", "updated_on_utc"),
    ]


def product_category_leaf_fields(store: CatalogStore) -> List[FieldDescriptor[Any]]:
    return [
        f("ProductCategoryId", "id"),
        f("ProductId", "product_id"),
        f("ProductName", lambda pc: store.product(pc.product_id).name),
        f("IsFeaturedProduct", "is_featured_product"),
        f("DisplayOrder", "display_order"),
    ]


# Products


def _category_names(store: CatalogStore, product: Product) -> Optional[str]:
    names = []
    for link in store.product_categories_by_product(product.id):
        category = store.category(link.category_id)
        names.append(category.name if category is not None else None)
    return joined_names(names)


def _manufacturer_names(store: CatalogStore, product: Product) -> Optional[str]:
    names = []
    for link in store.product_manufacturers_by_product(product.id):
        manufacturer = store.manufacturer(link.manufacturer_id)
        names.append(manufacturer.name if manufacturer is not None else None)
    return joined_names(names)


def _picture(store: CatalogStore, position: int) -> Callable[[Product], Optional[str]]:
    def accessor(product: Product) -> Optional[str]:
        pictures = store.pictures_for_product(product, PICTURES_PER_PRODUCT)
        return store.thumb_path(pictures[position]) if position < len(pictures) else None

    return accessor


def product_fields(store: CatalogStore) -> List[FieldDescriptor[Any]]:
    """Product spreadsheet columns, with dropdown domains for coded fields."""
    vendors = entity_domain(store.vendors)
    templates = entity_domain(store.product_templates)
    delivery_dates = entity_domain(store.delivery_dates)
    tax_categories = entity_domain(store.tax_categories)
    warehouses = entity_domain(store.warehouses)
    measure_weights = entity_domain(store.measure_weights)

    fields = [
        f("ProductType", "product_type", "product_type", domain=enum_domain(ProductType)),
        f("ParentGroupedProductId", "parent_grouped_product_id", "product_type"),
        f("VisibleIndividually", "visible_individually", "visible_individually"),
        f("Name", "name"),
        f("ShortDescription", "short_description"),
        f("FullDescription", "full_description"),
        f("Vendor", "vendor_id", "vendor", domain=vendors, allow_blank=True),
        f("ProductTemplate", "product_template_id", "product_template", domain=templates),
        f("ShowOnHomePage", "show_on_home_page", "show_on_home_page"),
        f("MetaKeywords", "meta_keywords", "seo"),
        f("MetaDescription", "meta_description", "seo"),
        f("MetaTitle", "meta_title", "seo"),
        f("SeName", "se_name", "seo"),
        f("AllowCustomerReviews", "allow_customer_reviews", "allow_customer_reviews"),
        f("Published", "published", "published"),
        f("SKU", "sku"),
        f("ManufacturerPartNumber", "manufacturer_part_number", "manufacturer_part_number"),
        f("Gtin", "gtin", "gtin"),
        f("IsGiftCard", "is_gift_card", "is_gift_card"),
        f("GiftCardType", "gift_card_type", "is_gift_card", domain=enum_domain(GiftCardType)),
        f("OverriddenGiftCardAmount", "overridden_gift_card_amount", "is_gift_card"),
        f("RequireOtherProducts", "require_other_products", "require_other_products"),
        f("RequiredProductIds", "required_product_ids", "require_other_products"),
        f("AutomaticallyAddRequiredProducts", "automatically_add_required_products", "require_other_products"),
        f("IsDownload", "is_download", "downloadable_product"),
        f("DownloadId", "download_id", "downloadable_product"),
        f("UnlimitedDownloads", "unlimited_downloads", "downloadable_product"),
        f("MaxNumberOfDownloads", "max_number_of_downloads", "downloadable_product"),
        f(
            "DownloadActivationType",
            "download_activation_type",
            "downloadable_product",
            domain=enum_domain(DownloadActivationType),
        ),
        f("HasSampleDownload", "has_sample_download", "downloadable_product"),
        f("SampleDownloadId", "sample_download_id", "downloadable_product"),
        f("HasUserAgreement", "has_user_agreement", "downloadable_product"),
        f("UserAgreementText", "user_agreement_text", "downloadable_product"),
        f("IsRecurring", "is_recurring", "recurring_product"),
        f("RecurringCycleLength", "recurring_cycle_length", "recurring_product"),
        f(
            "RecurringCyclePeriod",
            "recurring_cycle_period",
            "recurring_product",
            domain=enum_domain(RecurringProductCyclePeriod),
            allow_blank=True,
        ),
        f("RecurringTotalCycles", "recurring_total_cycles", "recurring_product"),
        f("IsRental", "is_rental", "is_rental"),
        f("RentalPriceLength", "rental_price_length", "is_rental"),
        f(
            "RentalPricePeriod",
            "rental_price_period",
            "is_rental",
            domain=enum_domain(RentalPricePeriod),
            allow_blank=True,
        ),
        f("IsShipEnabled", "is_ship_enabled"),
        f("IsFreeShipping", "is_free_shipping", "free_shipping"),
        f("ShipSeparately", "ship_separately", "ship_separately"),
        f("AdditionalShippingCharge", "additional_shipping_charge", "additional_shipping_charge"),
        f("DeliveryDate", "delivery_date_id", "delivery_date", domain=delivery_dates, allow_blank=True),
        f("IsTaxExempt", "is_tax_exempt"),
        f("TaxCategory", "tax_category_id", domain=tax_categories, allow_blank=True),
        f(
            "IsTelecommunicationsOrBroadcastingOrElectronicServices",
            "is_telecommunications_or_broadcasting_or_electronic_services",
            "telecommunications_services",
        ),
        f("ManageInventoryMethod", "manage_inventory_method", domain=enum_domain(ManageInventoryMethod)),
        f("UseMultipleWarehouses", "use_multiple_warehouses", "use_multiple_warehouses"),
        f("WarehouseId", "warehouse_id", "warehouse", domain=warehouses, allow_blank=True),
        f("StockQuantity", "stock_quantity"),
        f("DisplayStockAvailability", "display_stock_availability", "display_stock_availability"),
        f("DisplayStockQuantity", "display_stock_quantity", "display_stock_quantity"),
        f("MinStockQuantity", "min_stock_quantity", "minimum_stock_quantity"),
        f(
            "LowStockActivity",
            "low_stock_activity",
            "low_stock_activity",
            domain=enum_domain(LowStockActivity),
        ),
        f(
            "NotifyAdminForQuantityBelow",
            "notify_admin_for_quantity_below",
            "notify_admin_for_quantity_below",
        ),
        f("BackorderMode", "backorder_mode", "backorders", domain=enum_domain(BackorderMode)),
        f(
            "AllowBackInStockSubscriptions",
            "allow_back_in_stock_subscriptions",
            "allow_back_in_stock_subscriptions",
        ),
        f("OrderMinimumQuantity", "order_minimum_quantity", "minimum_cart_quantity"),
        f("OrderMaximumQuantity", "order_maximum_quantity", "maximum_cart_quantity"),
        f("AllowedQuantities", "allowed_quantities", "allowed_quantities"),
        f(
            "AllowAddingOnlyExistingAttributeCombinations",
            "allow_adding_only_existing_attribute_combinations",
            "allow_adding_only_existing_attribute_combinations",
        ),
        f("NotReturnable", "not_returnable", "not_returnable"),
        f("DisableBuyButton", "disable_buy_button", "disable_buy_button"),
        f("DisableWishlistButton", "disable_wishlist_button", "disable_wishlist_button"),
        f("AvailableForPreOrder", "available_for_pre_order", "available_for_pre_order"),
        f(
            "PreOrderAvailabilityStartDateTimeUtc",
            "pre_order_availability_start_date_time_utc",
            "available_for_pre_order",
        ),
        f("CallForPrice", "call_for_price", "call_for_price"),
        f("Price", "price"),
        f("OldPrice", "old_price", "old_price"),
        f("ProductCost", "product_cost", "product_cost"),
        f("SpecialPrice", "special_price", "special_price"),
        f("SpecialPriceStartDateTimeUtc", "special_price_start_date_time_utc", "special_price_start_date"),
        f("SpecialPriceEndDateTimeUtc", "special_price_end_date_time_utc", "special_price_end_date"),
        f("CustomerEntersPrice", "customer_enters_price", "customer_enters_price"),
        f("MinimumCustomerEnteredPrice", "minimum_customer_entered_price", "customer_enters_price"),
        f("MaximumCustomerEnteredPrice", "maximum_customer_entered_price", "customer_enters_price"),
        f("BasepriceEnabled", "baseprice_enabled", "base_price"),
        f("BasepriceAmount", "baseprice_amount", "base_price"),
        f("BasepriceUnit", "baseprice_unit_id", "base_price", domain=measure_weights, allow_blank=True),
        f("BasepriceBaseAmount", "baseprice_base_amount", "base_price"),
        f(
            "BasepriceBaseUnit",
            "baseprice_base_unit_id",
            "base_price",
            domain=measure_weights,
            allow_blank=True,
        ),
        f("MarkAsNew", "mark_as_new", "mark_as_new"),
        f("MarkAsNewStartDateTimeUtc", "mark_as_new_start_date_time_utc", "mark_as_new_start_date"),
        f("MarkAsNewEndDateTimeUtc", "mark_as_new_end_date_time_utc", "mark_as_new_end_date"),
        f("Weight", "weight", "weight"),
        f("Length", "length", "dimensions"),
        f("Width", "width", "dimensions"),
        f("Height", "height", "dimensions"),
        f("Categories", lambda p: _category_names(store, p)),
        f("Manufacturers", lambda p: _manufacturer_names(store, p), "manufacturers"),
        f("ProductTags", lambda p: joined_names([tag.name for tag in p.tags]), "product_tags"),
    ]
    for position in range(PICTURES_PER_PRODUCT):
        fields.append(f(f"Picture{position + 1}", _picture(store, position)))
    return fields


def product_attribute_fields() -> List[FieldDescriptor[Any]]:
    """Detail columns of the product attribute block."""
    offset = ATTRIBUTE_BLOCK_OFFSET
    return [
        f("AttributeId", "attribute_id", layout_offset=offset),
        f("AttributeName", "attribute_name", layout_offset=offset),
        f("AttributeTextPrompt", "attribute_text_prompt", layout_offset=offset),
        f("AttributeIsRequired", "attribute_is_required", layout_offset=offset),
        f(
            "AttributeControlType",
            "attribute_control_type",
            domain=enum_domain(AttributeControlType),
            layout_offset=offset,
        ),
        f("AttributeDisplayOrder", "attribute_display_order", layout_offset=offset),
        f("ProductAttributeValueId", "id", layout_offset=offset),
        f("ValueName", "name", layout_offset=offset),
        f(
            "AttributeValueType",
            "attribute_value_type",
            domain=enum_domain(AttributeValueType),
            allow_blank=True,
            layout_offset=offset,
        ),
        f("AssociatedProductId", "associated_product_id", layout_offset=offset),
        f("ColorSquaresRgb", "color_squares_rgb", layout_offset=offset),
        f("ImageSquaresPictureId", "image_squares_picture_id", layout_offset=offset),
        f("PriceAdjustment", "price_adjustment", layout_offset=offset),
        f("WeightAdjustment", "weight_adjustment", layout_offset=offset),
        f("Cost", "cost", layout_offset=offset),
        f("CustomerEntersQty", "customer_enters_qty", layout_offset=offset),
        f("Quantity", "quantity", layout_offset=offset),
        f("IsPreSelected", "is_pre_selected", layout_offset=offset),
        f("DisplayOrder", "display_order", layout_offset=offset),
        f("PictureId", "picture_id", layout_offset=offset),
    ]


def product_element_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ProductId", "id", "id"),
        f("ProductTypeId", "product_type", "product_type"),
        f("ParentGroupedProductId", "parent_grouped_product_id", "product_type"),
        f("VisibleIndividually", "visible_individually", "visible_individually"),
        f("Name", "name"),
        f("ShortDescription", "short_description"),
        f("FullDescription", "full_description"),
        f("AdminComment", "admin_comment", "admin_comment"),
        f("VendorId", "vendor_id", "vendor"),
        f("ProductTemplateId", "product_template_id", "product_template"),
        f("ShowOnHomePage", "show_on_home_page", "show_on_home_page"),
        f("MetaKeywords", "meta_keywords", "seo"),
        f("MetaDescription", "meta_description", "seo"),
        f("MetaTitle", "meta_title", "seo"),
        f("SEName", "se_name", "seo"),
        f("AllowCustomerReviews", "allow_customer_reviews", "allow_customer_reviews"),
        f("SKU", "sku"),
        f("ManufacturerPartNumber", "manufacturer_part_number", "manufacturer_part_number"),
        f("Gtin", "gtin", "gtin"),
        f("IsGiftCard", "is_gift_card", "is_gift_card"),
        f("GiftCardType", lambda p: p.gift_card_type.name, "is_gift_card"),
        f("OverriddenGiftCardAmount", "overridden_gift_card_amount", "is_gift_card"),
        f("RequireOtherProducts", "require_other_products", "require_other_products"),
        f("RequiredProductIds", "required_product_ids", "require_other_products"),
        f("AutomaticallyAddRequiredProducts", "automatically_add_required_products", "require_other_products"),
        f("IsDownload", "is_download", "downloadable_product"),
        f("DownloadId", "download_id", "downloadable_product"),
        f("UnlimitedDownloads", "unlimited_downloads", "downloadable_product"),
        f("MaxNumberOfDownloads", "max_number_of_downloads", "downloadable_product"),
        f("DownloadExpirationDays", "download_expiration_days", "downloadable_product"),
        f("DownloadActivationType", lambda p: p.download_activation_type.name, "downloadable_product"),
        f("HasSampleDownload", "has_sample_download", "downloadable_product"),
        f("SampleDownloadId", "sample_download_id", "downloadable_product"),
        f("HasUserAgreement", "has_user_agreement", "downloadable_product"),
        f("UserAgreementText", "user_agreement_text", "downloadable_product"),
        f("IsRecurring", "is_recurring", "recurring_product"),
        f("RecurringCycleLength", "recurring_cycle_length", "recurring_product"),
        f("RecurringCyclePeriodId", "recurring_cycle_period", "recurring_product"),
        f("RecurringTotalCycles", "recurring_total_cycles", "recurring_product"),
        f("IsRental", "is_rental", "is_rental"),
        f("RentalPriceLength", "rental_price_length", "is_rental"),
        f("RentalPricePeriodId", "rental_price_period", "is_rental"),
        f("IsShipEnabled", "is_ship_enabled"),
        f("IsFreeShipping", "is_free_shipping", "free_shipping"),
        f("ShipSeparately", "ship_separately", "ship_separately"),
        f("AdditionalShippingCharge", "additional_shipping_charge", "additional_shipping_charge"),
        f("DeliveryDateId", "delivery_date_id", "delivery_date"),
        f("IsTaxExempt", "is_tax_exempt"),
        f("TaxCategoryId", "tax_category_id"),
        f(
            "IsTelecommunicationsOrBroadcastingOrElectronicServices",
            "is_telecommunications_or_broadcasting_or_electronic_services",
            "telecommunications_services",
        ),
        f("ManageInventoryMethodId", "manage_inventory_method"),
        f("UseMultipleWarehouses", "use_multiple_warehouses", "use_multiple_warehouses"),
        f("WarehouseId", "warehouse_id", "warehouse"),
        f("StockQuantity", "stock_quantity"),
        f("DisplayStockAvailability", "display_stock_availability", "display_stock_availability"),
        f("DisplayStockQuantity", "display_stock_quantity", "display_stock_quantity"),
        f("MinStockQuantity", "min_stock_quantity", "minimum_stock_quantity"),
        f("LowStockActivityId", "low_stock_activity", "low_stock_activity"),
        f(
            "NotifyAdminForQuantityBelow",
            "notify_admin_for_quantity_below",
            "notify_admin_for_quantity_below",
        ),
        f("BackorderModeId", "backorder_mode", "backorders"),
        f(
            "AllowBackInStockSubscriptions",
            "allow_back_in_stock_subscriptions",
            "allow_back_in_stock_subscriptions",
        ),
        f("OrderMinimumQuantity", "order_minimum_quantity", "minimum_cart_quantity"),
        f("OrderMaximumQuantity", "order_maximum_quantity", "maximum_cart_quantity"),
        f("AllowedQuantities", "allowed_quantities", "allowed_quantities"),
        f(
            "AllowAddingOnlyExistingAttributeCombinations",
            "allow_adding_only_existing_attribute_combinations",
            "allow_adding_only_existing_attribute_combinations",
        ),
        f("NotReturnable", "not_returnable", "not_returnable"),
        f("DisableBuyButton", "disable_buy_button", "disable_buy_button"),
        f("DisableWishlistButton", "disable_wishlist_button", "disable_wishlist_button"),
        f("AvailableForPreOrder", "available_for_pre_order", "available_for_pre_order"),
        f(
            "PreOrderAvailabilityStartDateTimeUtc",
            "pre_order_availability_start_date_time_utc",
            "available_for_pre_order",
        ),
        f("CallForPrice", "call_for_price", "call_for_price"),
        f("Price", "price"),
        f("OldPrice", "old_price", "old_price"),
        f("ProductCost", "product_cost", "product_cost"),
        f("SpecialPrice", "special_price", "special_price"),
        f("SpecialPriceStartDateTimeUtc", "special_price_start_date_time_utc", "special_price_start_date"),
        f("SpecialPriceEndDateTimeUtc", "special_price_end_date_time_utc", "special_price_end_date"),
        f("CustomerEntersPrice", "customer_enters_price", "customer_enters_price"),
        f("MinimumCustomerEnteredPrice", "minimum_customer_entered_price", "customer_enters_price"),
        f("MaximumCustomerEnteredPrice", "maximum_customer_entered_price", "customer_enters_price"),
        f("BasepriceEnabled", "baseprice_enabled", "base_price"),
        f("BasepriceAmount", "baseprice_amount", "base_price"),
        f("BasepriceUnitId", "baseprice_unit_id", "base_price"),
        f("BasepriceBaseAmount", "baseprice_base_amount", "base_price"),
        f("BasepriceBaseUnitId", "baseprice_base_unit_id", "base_price"),
        f("MarkAsNew", "mark_as_new", "mark_as_new"),
        f("MarkAsNewStartDateTimeUtc", "mark_as_new_start_date_time_utc", "mark_as_new_start_date"),
        f("MarkAsNewEndDateTimeUtc", "mark_as_new_end_date_time_utc", "mark_as_new_end_date"),
        f("Weight", "weight", "weight"),
        f("Length", "length", "dimensions"),
        f("Width", "width", "dimensions"),
        f("Height", "height", "dimensions"),
        f("Published", "published", "published"),
        f("CreatedOnUtc", "created_on_utc", "created_on"),
        f("UpdatedOnUtc", "updated_on_utc", "updated_on"),
    ]


def discount_fields() -> List[FieldDescriptor[Any]]:
    return [f("DiscountId", "id"), f("Name", "name")]


def tier_price_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("TierPriceId", "id"),
        f("StoreId", "store_id"),
        f("CustomerRoleId", lambda tp: tp.customer_role_id or 0),
        f("Quantity", "quantity"),
        f("Price", "price"),
    ]


def _when_validated(attribute: str) -> Callable[[ProductAttributeMapping], Any]:
    """Validation settings only apply to free-input control types."""
    getter = attrgetter(attribute)

    def accessor(mapping: ProductAttributeMapping) -> Any:
        return getter(mapping) if mapping.validation_rules_allowed() else None

    return accessor


def attribute_mapping_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ProductAttributeMappingId", "id"),
        f("ProductAttributeId", "product_attribute_id"),
        f("ProductAttributeName", "product_attribute_name"),
        f("TextPrompt", "text_prompt"),
        f("IsRequired", "is_required"),
        f("AttributeControlTypeId", "attribute_control_type"),
        f("DisplayOrder", "display_order"),
        f("ValidationMinLength", _when_validated("validation_min_length")),
        f("ValidationMaxLength", _when_validated("validation_max_length")),
        f("ValidationFileAllowedExtensions", _when_validated("validation_file_allowed_extensions")),
        f("ValidationFileMaximumSize", _when_validated("validation_file_maximum_size")),
        f("DefaultValue", _when_validated("default_value")),
        f("ConditionAttributeXml", "condition_attribute_xml"),
    ]


def attribute_value_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ProductAttributeValueId", "id"),
        f("Name", "name"),
        f("AttributeValueTypeId", "attribute_value_type"),
        f("AssociatedProductId", "associated_product_id"),
        f("ColorSquaresRgb", "color_squares_rgb"),
        f("ImageSquaresPictureId", "image_squares_picture_id"),
        f("PriceAdjustment", "price_adjustment"),
        f("WeightAdjustment", "weight_adjustment"),
        f("Cost", "cost"),
        f("CustomerEntersQty", "customer_enters_qty"),
        f("Quantity", "quantity"),
        f("IsPreSelected", "is_pre_selected"),
        f("DisplayOrder", "display_order"),
        f("PictureId", "picture_id"),
    ]


def product_picture_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ProductPictureId", "id"),
        f("PictureId", "picture_id"),
        f("DisplayOrder", "display_order"),
    ]


def product_category_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ProductCategoryId", "id"),
        f("CategoryId", "category_id"),
        f("IsFeaturedProduct", "is_featured_product"),
        f("DisplayOrder", "display_order"),
    ]


def product_manufacturer_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ProductManufacturerId", "id"),
        f("ManufacturerId", "manufacturer_id"),
        f("IsFeaturedProduct", "is_featured_product"),
        f("DisplayOrder", "display_order"),
    ]


def specification_attribute_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ProductSpecificationAttributeId", "id"),
        f("SpecificationAttributeOptionId", "specification_attribute_option_id"),
        f("CustomValue", "custom_value"),
        f("AllowFiltering", "allow_filtering"),
        f("ShowOnProductPage", "show_on_product_page"),
        f("DisplayOrder", "display_order"),
    ]


def product_tag_fields() -> List[FieldDescriptor[Any]]:
    return [f("Id", "id"), f("Name", "name")]


# Orders


def _address(kind: str, attribute: str) -> Callable[[Order], Any]:
    def accessor(order: Order) -> Any:
        address = getattr(order, f"{kind}_address")
        return getattr(address, attribute) if address is not None else None

    return accessor


ADDRESS_COLUMNS = (
    ("FirstName", "first_name"),
    ("LastName", "last_name"),
    ("Email", "email"),
    ("Company", "company"),
    ("Country", "country"),
    ("StateProvince", "state_province"),
    ("City", "city"),
    ("Address1", "address1"),
    ("Address2", "address2"),
    ("ZipPostalCode", "zip_postal_code"),
    ("PhoneNumber", "phone_number"),
    ("FaxNumber", "fax_number"),
)


def _order_core_fields(id_name: str) -> List[FieldDescriptor[Any]]:
    return [
        f(id_name, "id"),
        f("StoreId", "store_id"),
        f("OrderGuid", "order_guid"),
        f("CustomerId", "customer_id"),
        f("OrderStatusId", "order_status_id"),
        f("PaymentStatusId", "payment_status_id"),
        f("ShippingStatusId", "shipping_status_id"),
        f("OrderSubtotalInclTax", "order_subtotal_incl_tax"),
        f("OrderSubtotalExclTax", "order_subtotal_excl_tax"),
        f("OrderShippingInclTax", "order_shipping_incl_tax"),
        f("OrderShippingExclTax", "order_shipping_excl_tax"),
        f("TaxRates", "tax_rates"),
        f("OrderTax", "order_tax"),
        f("OrderTotal", "order_total"),
        f("RefundedAmount", "refunded_amount"),
        f("OrderDiscount", "order_discount"),
        f("CurrencyRate", "currency_rate"),
        f("CustomerCurrencyCode", "customer_currency_code"),
        f("AffiliateId", "affiliate_id"),
        f("PaymentMethodSystemName", "payment_method_system_name"),
        f("ShippingPickUpInStore", "pick_up_in_store"),
        f("ShippingMethod", "shipping_method"),
        f("ShippingRateComputationMethodSystemName", "shipping_rate_computation_method_system_name"),
        f("CustomValuesXml", "custom_values_xml"),
        f("VatNumber", "vat_number"),
    ]


def order_fields() -> List[FieldDescriptor[Any]]:
    fields = _order_core_fields("OrderId")
    fields.append(f("CreatedOnUtc", "created_on_utc"))
    for kind, prefix in (("billing", "Billing"), ("shipping", "Shipping")):
        for column, attribute in ADDRESS_COLUMNS:
            fields.append(f(f"{prefix}{column}", _address(kind, attribute)))
    return fields


def order_element_fields() -> List[FieldDescriptor[Any]]:
    fields = _order_core_fields("OrderId")
    fields.append(f("Deleted", "deleted"))
    fields.append(f("CreatedOnUtc", "created_on_utc"))
    return fields


def order_item_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("Id", "id"),
        f("OrderItemGuid", "order_item_guid"),
        f("ProductId", "product_id"),
        f("ProductName", "product_name"),
        f("Sku", "sku"),
        f("PriceInclTax", "price_incl_tax"),
        f("PriceExclTax", "price_excl_tax"),
        f("Quantity", "quantity"),
        f("DiscountAmountInclTax", "discount_incl_tax"),
        f("DiscountAmountExclTax", "discount_excl_tax"),
        f("TotalInclTax", "total_incl_tax"),
        f("TotalExclTax", "total_excl_tax"),
        f("RentalStartDateUtc", "rental_start_date_utc"),
        f("RentalEndDateUtc", "rental_end_date_utc"),
    ]


def shipment_fields() -> List[FieldDescriptor[Any]]:
    return [
        f("ShipmentId", "id"),
        f("TrackingNumber", "tracking_number"),
        f("TotalWeight", "total_weight"),
        f("ShippedDateUtc", "shipped_date_utc"),
        f("DeliveryDateUtc", "delivery_date_utc"),
        f("CreatedOnUtc", "created_on_utc"),
    ]


# Customers


def _in_role(role: str) -> Callable[[Customer], bool]:
    return lambda customer: customer.is_in_role(role)


def _customer_fields(country_before_street: bool) -> List[FieldDescriptor[Any]]:
    fields = [
        f("CustomerId", "id"),
        f("CustomerGuid", "customer_guid"),
        f("Email", "email"),
        f("Username", "username"),
        f("Password", "password"),
        f("PasswordFormatId", "password_format_id"),
        f("PasswordSalt", "password_salt"),
        f("IsTaxExempt", "is_tax_exempt"),
        f("AffiliateId", "affiliate_id"),
        f("VendorId", "vendor_id"),
        f("Active", "active"),
    ]
    fields += [f(column, _in_role(role)) for column, role in CUSTOMER_ROLE_COLUMNS]
    fields += [
        f("FirstName", "first_name"),
        f("LastName", "last_name"),
        f("Gender", "gender"),
        f("Company", "company"),
    ]
    address = [
        f("StreetAddress", "street_address"),
        f("StreetAddress2", "street_address2"),
        f("ZipPostalCode", "zip_postal_code"),
        f("City", "city"),
    ]
    country = [f("CountryId", "country_id")]
    fields += country + address if country_before_street else address + country
    fields += [
        f("StateProvinceId", "state_province_id"),
        f("Phone", "phone"),
        f("Fax", "fax"),
        f("VatNumber", "vat_number"),
        f("TimeZoneId", "time_zone_id"),
    ]
    return fields


def customer_fields() -> List[FieldDescriptor[Any]]:
    return _customer_fields(country_before_street=False)


def customer_element_fields(store: CatalogStore) -> List[FieldDescriptor[Any]]:
    """Customer elements, plus one newsletter flag per store."""
    fields = _customer_fields(country_before_street=True)
    for shop in store.stores:
        fields.append(
            f(
                f"Newsletter-in-store-{shop.id}",
                lambda customer, store_id=shop.id: store.newsletter_active(customer.email, store_id),
            )
        )
    return fields
