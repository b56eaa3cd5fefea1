from decimal import Decimal

import pytest
from contracts.raw_ocr_schema import DocumentEntity, EntityProperty
from paragon_ocr.parsing.parser.entity_reducer import EntityReducer


def line_item(description="", quantity="", price="", total_price="", entity_type="line_item"):
    properties = []
    for name, text in [
        ("line_item/description", description),
        ("line_item/quantity", quantity),
        ("line_item/price", price),
        ("line_item/total_price", total_price),
    ]:
        if text:
            properties.append(EntityProperty(type=name, mention_text=text))
    return DocumentEntity(type=entity_type, confidence=0.9, mention_text=description, properties=properties)


@pytest.fixture
def reducer():
    return EntityReducer()


def test_direct_mapping(reducer):
    entities = [
        DocumentEntity("receipt_merchant_name", 0.98, "Biedronka"),
        DocumentEntity("receipt_date", 0.95, "2024-03-15"),
        DocumentEntity("receipt_total_amount", 0.97, "45,67"),
        line_item("Mleko", "2", "3,99", "7,98"),
    ]
    receipt = reducer.reduce(entities, ["Biedronka\n..."]).receipt

    assert receipt.merchant == "Biedronka"
    assert receipt.date == "2024-03-15"
    assert receipt.total_amount == Decimal("45.67")
    assert len(receipt.items) == 1
    item = receipt.items[0]
    assert (item.name, item.price, item.quantity, item.category) == ("Mleko", Decimal("7.98"), 2, "Dairy")


def test_all_entities_kept_as_fields(reducer):
    entities = [
        DocumentEntity("receipt_merchant_name", 0.98, "Biedronka"),
        DocumentEntity("currency", 0.5, "PLN"),
    ]
    receipt = reducer.reduce(entities, []).receipt

    assert [(f.name, f.value) for f in receipt.fields] == [
        ("receipt_merchant_name", "Biedronka"),
        ("currency", "PLN"),
    ]
    assert receipt.fields[1].confidence == 0.5


def test_aliases(reducer):
    entities = [
        DocumentEntity("supplier_name", 0.9, "Lidl"),
        DocumentEntity("transaction_date", 0.9, "2024-01-02"),
        DocumentEntity("total_amount", 0.9, "12.00"),
        line_item("Bread", total_price="4,98", entity_type="expense_line_item"),
    ]
    receipt = reducer.reduce(entities, []).receipt
    assert receipt.merchant == "Lidl"
    assert receipt.date == "2024-01-02"
    assert receipt.total_amount == Decimal("12.00")
    assert receipt.items[0].name == "Bread"


def test_price_falls_back_to_unit_price(reducer):
    receipt = reducer.reduce([line_item("Chleb", price="2,49")], []).receipt
    assert receipt.items[0].price == Decimal("2.49")
    assert receipt.items[0].quantity == 1


def test_item_without_description_dropped(reducer):
    receipt = reducer.reduce([line_item(price="2,49")], []).receipt
    assert receipt.items == []


def test_first_nonzero_total_kept(reducer):
    entities = [
        DocumentEntity("receipt_total_amount", 0.9, "???"),
        DocumentEntity("receipt_total_amount", 0.9, "45,67"),
        DocumentEntity("receipt_total_amount", 0.9, "99,99"),
    ]
    assert reducer.reduce(entities, []).receipt.total_amount == Decimal("45.67")


def test_fallback_for_shop_receipt(reducer):
    text = ["Kiosk\nMilk\n1 x3,99 3,99C\nBread\n2 ×2,49 4,98C\nThank you\n45,67"]
    result = reducer.reduce([], text, instructions="Please parse this SHOP RECEIPT")

    receipt = result.receipt
    assert [item.name for item in receipt.items] == ["Milk", "Bread"]
    assert receipt.total_amount == Decimal("45.67")
    assert result.trace.by_stage("fallback")


def test_fallback_keeps_entity_total(reducer):
    text = ["Milk\n1 x3,99 3,99C\n45,67"]
    entities = [DocumentEntity("receipt_total_amount", 0.9, "3,99")]
    receipt = reducer.reduce(entities, text, instructions="shop receipt").receipt

    assert receipt.total_amount == Decimal("3.99")
    assert len(receipt.items) == 1


def test_no_fallback_without_instruction(reducer):
    text = ["Milk\n1 x3,99 3,99C"]
    assert reducer.reduce([], text).receipt.items == []
    assert reducer.reduce([], text, instructions="invoice").receipt.items == []


def test_no_fallback_when_entities_have_items(reducer):
    text = ["Milk\n1 x3,99 3,99C"]
    receipt = reducer.reduce([line_item("Chleb", total_price="2,49")], text, instructions="shop receipt").receipt
    assert [item.name for item in receipt.items] == ["Chleb"]


def test_is_shop_receipt(reducer):
    assert reducer.is_shop_receipt("shop receipt")
    assert reducer.is_shop_receipt("This is a Shop Receipt from Poland")
    assert not reducer.is_shop_receipt("")
    assert not reducer.is_shop_receipt(None)
    assert not reducer.is_shop_receipt("receipt")
