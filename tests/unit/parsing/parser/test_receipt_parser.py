from decimal import Decimal

import pytest
from paragon_ocr.parsing.parser.receipt_parser import ReceiptParser

RECEIPT_TEXT = [
    "\n".join([
        "PARAGON FISKALNY",
        "Jeronimo Martins Polska S.A.",
        "ul. Żniwna 5",
        "62-025 Kostrzyn",
        "NIP 779-10-11-327",
        "Sklep 1234",
        "2024-03-15 14:22",
    ]),
    "Mleko 3,2%",
    "1 x3,99 3,99C",
    "Chleb",
    "2 ×2,49 4,98C",
    "Czekolada 1 x5,49 5,49A",
    "SUMA PLN 14,46",
    "Karta 14,46",
    "Dziękujemy",
]


@pytest.fixture
def parser():
    return ReceiptParser()


def test_full_receipt(parser):
    receipt = parser.parse(RECEIPT_TEXT).receipt

    assert receipt.merchant == "Jeronimo Martins Polska S.A."
    assert receipt.date == "2024-03-15"
    assert receipt.total_amount == Decimal("14.46")
    assert [item.name for item in receipt.items] == ["Mleko 3,2%", "Chleb", "Czekolada"]
    assert [item.category for item in receipt.items] == ["Dairy", "Bakery", "Sweets"]
    assert receipt.items[1].quantity == 2
    assert receipt.items[1].price == Decimal("4.98")
    assert receipt.raw_text == RECEIPT_TEXT
    assert receipt.fields == []


def test_total_precedence(parser):
    receipt = parser.parse(["Suma 45,67", "99,99"]).receipt
    assert receipt.total_amount == Decimal("45.67")


def test_simple_line_item(parser):
    receipt = parser.parse(["Milk", "1 x3,99 3,99C"]).receipt
    assert len(receipt.items) == 1
    item = receipt.items[0]
    assert (item.name, item.price, item.quantity) == ("Milk", Decimal("3.99"), 1)


def test_total_line_not_an_item(parser):
    receipt = parser.parse(["Total 42,99"]).receipt
    assert receipt.items == []
    assert receipt.total_amount == Decimal("42.99")


def test_skip_keywords_not_items(parser):
    receipt = parser.parse(["Paragon", "1 x3,99 3,99C"]).receipt
    assert receipt.items == []


def test_empty_input_returns_empty_receipt(parser):
    result = parser.parse([])
    assert result.receipt.merchant == ""
    assert result.receipt.date == ""
    assert result.receipt.total_amount == Decimal("0")
    assert result.receipt.items == []
    assert result.receipt.has_total is False


@pytest.mark.parametrize("texts", [
    [""],
    ["\n\n\n"],
    ["x 3,99", "× ×", "1 x", ",,,", "99999999999999999999,99"],
    ["1 x3,99 3,99C"],
    ["0 x0,00 0,00"],
    ["Suma", "Suma 1,2,3", "NaN", "Infinity"],
    ["×" * 50, "1" * 500],
])
def test_never_raises(parser, texts):
    result = parser.parse(texts)
    assert result.receipt is not None


def test_idempotent(parser):
    first = parser.parse(RECEIPT_TEXT)
    second = parser.parse(RECEIPT_TEXT)
    assert first.receipt.model_dump_json() == second.receipt.model_dump_json()
    assert first.trace.to_dict() == second.trace.to_dict()


def test_trace_records_decisions(parser):
    trace = parser.parse(["Milk", "1 x3,99 3,99C", "Total 1 x42,99 42,99"]).trace

    assert trace.mode == "heuristic"
    assert [step.action for step in trace.by_stage("items")] == ["accepted", "rejected"]
    assert trace.by_stage("total")[0].action == "found"
    assert trace.by_stage("date")[0].action == "missing"


def test_serialized_receipt(parser):
    data = parser.parse(["Milk", "1 x3,99 3,99C", "Suma 3,99"]).receipt.to_dict()

    assert set(data) == {"merchant", "date", "total_amount", "items", "raw_text", "fields"}
    assert data["total_amount"] == "3.99"
    assert data["items"][0] == {"name": "Milk", "price": "3.99", "quantity": 1, "category": "Dairy"}


def test_locale_currency_not_an_item_name(parser):
    receipt = parser.parse(["Mleko", "1 x3,99 3,99 zł", "Chleb 2 x2,49 4,98 PLN", "SUMA PLN 1 008,97"]).receipt

    assert [item.name for item in receipt.items] == ["Mleko", "Chleb"]
    assert [item.category for item in receipt.items] == ["Dairy", "Bakery"]
    assert receipt.total_amount == Decimal("1008.97")
