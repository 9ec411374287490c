"""End-to-end tests for the per-entity export operations."""

from catalog_export.facade import ExportFacade
from catalog_export.settings import settings_from_mapping


def _column(document, name):
    """1-based column of ``name`` in the caption row of the primary sheet."""
    return document.primary.row(1).cells.index(name) + 1


def _rule(document, column, source_sheet):
    (rule,) = [r for r in document.validations_for(document.primary.name, column) if r.source.sheet == source_sheet]
    return rule


def _by_name(elements):
    return {e.findtext("Name"): e for e in elements}


# Categories


def test_categories_xml_nests_subcategories(store, settings):
    root = ExportFacade(store, settings).export_categories_xml()

    assert root.tag == "Categories"
    assert root.get("Version") == settings.version
    (a,) = root.findall("Category")
    assert a.findtext("Name") == "A"
    assert [p.findtext("ProductId") for p in a.find("Products")] == ["10"]

    b, c = a.find("SubCategories").findall("Category")
    assert (b.findtext("Name"), c.findtext("Name")) == ("B", "C")
    # The only product in B is deleted.
    assert len(b.find("Products")) == 0
    assert [p.findtext("ProductId") for p in c.find("Products")] == ["13"]
    assert c.find("Products/ProductCategory").findtext("IsFeaturedProduct") == "True"


def test_categories_xlsx_is_flat(store, settings):
    document = ExportFacade(store, settings).export_categories_xlsx()
    primary = document.primary

    assert primary.name == "Category"
    assert primary.row_count == 4
    assert [primary.row(k).value(_column(document, "Name")) for k in (2, 3, 4)] == ["A", "C", "B"]
    assert document.auxiliary_sheets == []


# Manufacturers


def test_manufacturers_xml_skips_gone_products(store, settings):
    root = ExportFacade(store, settings).export_manufacturers_xml()
    manufacturers = _by_name(root.findall("Manufacturer"))

    assert list(manufacturers) == ["Acme", "Globex"]
    acme_products = manufacturers["Acme"].find("Products")
    assert [p.findtext("ProductName") for p in acme_products] == ["Widget"]
    assert [p.findtext("ProductName") for p in manufacturers["Globex"].find("Products")] == ["Widget"]
    assert manufacturers["Acme"].find("SubManufacturers") is None


def test_manufacturers_xlsx_picture_path(store, settings):
    document = ExportFacade(store, settings).export_manufacturers_xlsx()
    picture = _column(document, "Picture")
    assert document.primary.row(2).value(picture) == "images/thumbs/0000500_widget-front.jpeg"
    assert document.primary.row(3).value(picture) is None


# Products


def test_products_xlsx_interleaves_attribute_blocks(store, settings):
    document = ExportFacade(store, settings).export_products_xlsx()
    primary = document.primary
    name = _column(document, "Name")

    assert primary.name == "Product"
    assert primary.row_count == 9
    assert primary.row(2).value(name) == "Widget"
    assert [primary.row(k).value(name) for k in (7, 8, 9)] == ["Gadget", "Old", "Thing"]

    caption = primary.row(3)
    assert caption.caption and caption.offset == 2 and caption.outline_level == 1
    assert caption.cells[0] == "AttributeId"
    assert [primary.row(k).value(10) for k in (4, 5, 6)] == ["Red", "Blue", None]
    assert primary.row(6).value(4) == "Engraving"
    assert all(primary.row(k).collapsed for k in range(3, 7))

    product_type = _rule(document, _column(document, "ProductType"), "DataForProductFilters")
    assert product_type.spans == [(2, 2), (7, 9)]
    control_type = _rule(document, 7, "DataForProductAttributesFilters")
    assert control_type.spans == [(4, 6)]
    assert [s.name for s in document.auxiliary_sheets] == [
        "DataForProductFilters",
        "DataForProductAttributesFilters",
    ]


def test_products_xlsx_related_columns(store, settings):
    document = ExportFacade(store, settings).export_products_xlsx()
    widget = document.primary.row(2)

    assert widget.value(_column(document, "Manufacturers")) == "Acme;Globex"
    assert widget.value(_column(document, "Categories")) == "A"
    assert widget.value(_column(document, "ProductTags")) == "new;sale"
    assert widget.value(_column(document, "Picture1")) == "images/thumbs/0000500_widget-front.jpeg"
    assert widget.value(_column(document, "Picture2")) == "images/thumbs/0000501.png"
    assert widget.value(_column(document, "Picture3")) is None
    assert document.primary.row(7).value(_column(document, "Manufacturers")) is None


def test_products_xlsx_toggles_and_advanced_mode(store, settings, advanced_settings):
    basic = ExportFacade(store, settings).export_products_xlsx()
    assert "Vendor" not in basic.primary.row(1).cells

    advanced = ExportFacade(store, advanced_settings).export_products_xlsx()
    vendor = _column(advanced, "Vendor")
    assert advanced.primary.row(2).value(vendor) == 1
    rule = _rule(advanced, vendor, "DataForProductFilters")
    assert rule.allow_blank


def test_products_xlsx_without_attribute_blocks(store):
    settings = settings_from_mapping({"export_product_attributes": False})
    document = ExportFacade(store, settings).export_products_xlsx()

    assert document.primary.row_count == 5
    assert all(row.outline_level == 0 for row in document.primary.rows)
    (rule,) = document.validations_for("Product", _column(document, "ProductType"))
    assert rule.spans[0][0] == 2
    assert [s.name for s in document.auxiliary_sheets] == ["DataForProductFilters"]


def test_products_xlsx_without_dropdowns(store):
    settings = settings_from_mapping({"use_dropdown_lists": False})
    document = ExportFacade(store, settings).export_products_xlsx()
    assert document.validations == []
    assert document.auxiliary_sheets == []
    assert document.primary.row_count == 9


def test_products_xml_basic_mode(store, settings):
    root = ExportFacade(store, settings).export_products_xml()
    widget = _by_name(root.findall("Product"))["Widget"]

    assert widget.findtext("ProductId") == "10"
    assert widget.find("AdminComment") is None
    assert widget.find("ProductDiscounts") is None
    assert widget.find("TierPrices") is None
    assert [p.findtext("PictureId") for p in widget.find("ProductPictures")] == ["500", "501"]
    assert [t.findtext("Name") for t in widget.find("ProductTags")] == ["new", "sale"]

    color, engraving = widget.find("ProductAttributes")
    assert [v.findtext("Name") for v in color.find("ProductAttributeValues")] == ["Red", "Blue"]
    assert color.findtext("ValidationMaxLength") == ""
    assert engraving.findtext("ValidationMaxLength") == "20"
    assert len(engraving.find("ProductAttributeValues")) == 0


def test_products_xml_advanced_mode(store, advanced_settings):
    root = ExportFacade(store, advanced_settings).export_products_xml()
    widget = _by_name(root.findall("Product"))["Widget"]

    assert widget.findtext("AdminComment") == "internal"
    assert [d.findtext("Name") for d in widget.find("ProductDiscounts")] == ["Spring"]
    assert [t.findtext("Price") for t in widget.find("TierPrices")] == ["8.50"]


def test_products_xml_respects_group_toggles(store):
    settings = settings_from_mapping({"product_editor": {"product_tags": False, "manufacturers": False}})
    root = ExportFacade(store, settings).export_products_xml()
    widget = root.find("Product")
    assert widget.find("ProductTags") is None
    assert widget.find("ProductManufacturers") is None
    assert widget.find("ProductCategories") is not None


# Orders


def test_orders_xml(store, settings):
    root = ExportFacade(store, settings).export_orders_xml()
    first, second = root.findall("Order")

    assert [s.findtext("ShipmentId") for s in first.find("Shipments")] == ["1", "2"]
    assert [i.findtext("ProductName") for i in first.find("OrderItems")] == ["Widget"]
    assert first.findtext("OrderTotal") == "30"
    assert second.find("OrderItems") is None
    assert second.find("Shipments") is None


def test_orders_xlsx_address_columns(store, settings):
    document = ExportFacade(store, settings).export_orders_xlsx()
    first, second = document.primary.row(2), document.primary.row(3)

    assert first.value(_column(document, "BillingFirstName")) == "Ann"
    assert first.value(_column(document, "BillingCity")) == "Oslo"
    assert first.value(_column(document, "ShippingCity")) is None
    assert second.value(_column(document, "BillingCity")) is None


# Customers


def test_customers_xml_newsletter_and_roles(store, settings):
    root = ExportFacade(store, settings).export_customers_xml()
    (ann,) = root.findall("Customer")

    assert ann.findtext("Newsletter-in-store-1") == "True"
    assert ann.findtext("Newsletter-in-store-2") == "False"
    assert ann.findtext("IsRegistered") == "True"
    assert ann.findtext("IsAdministrator") == "False"


def test_customers_xlsx(store, settings):
    document = ExportFacade(store, settings).export_customers_xlsx()
    ann = document.primary.row(2)
    assert ann.value(_column(document, "Email")) == "ann@example.com"
    assert ann.value(_column(document, "IsGuest")) is False
    assert "Newsletter-in-store-1" not in document.primary.row(1).cells


# Plain text


def test_newsletter_subscribers_txt(store, settings):
    text = ExportFacade(store, settings).export_newsletter_subscribers_txt()
    assert text == "ann@example.com,True,1\nbob@example.com,False,2\n"


def test_states_txt(store, settings):
    assert ExportFacade(store, settings).export_states_txt() == "US,New York,NY,True,1\n"


def test_explicit_records_override_the_store(store, settings):
    facade = ExportFacade(store, settings)
    assert facade.export_states_txt([]) == ""
    root = facade.export_categories_xml([store.category(1)])
    assert [c.findtext("Name") for c in root.iter("Category")] == ["A"]
