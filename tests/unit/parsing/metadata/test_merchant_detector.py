import pytest
from paragon_ocr.parsing.metadata.merchant_detector import MerchantDetector


@pytest.fixture
def detector():
    return MerchantDetector()


def test_short_block_uses_first_line(detector):
    result = detector.detect(["Shop A\nul. Prosta 1\n00-001 Warszawa"])
    assert result.name == "Shop A"
    assert result.line_index == 0
    assert result.method == "first_line"


def test_long_block_without_suffix_uses_sixth_line(detector):
    block = "\n".join(f"line {i}" for i in range(1, 9))
    result = detector.detect([block])
    assert result.name == "line 6"
    assert result.line_index == 5
    assert result.method == "fallback_line"


def test_long_block_with_suffix(detector):
    lines = [
        "PARAGON",
        "Jeronimo Martins Polska S.A.",
        "ul. Żniwna 5",
        "62-025 Kostrzyn",
        "NIP 779-10-11-327",
        "Sklep 1234",
        "2024-03-15",
    ]
    result = detector.detect(["\n".join(lines)])
    assert result.name == "Jeronimo Martins Polska S.A."
    assert result.method == "suffix"


def test_suffix_after_sixth_line_ignored(detector):
    lines = [f"line {i}" for i in range(1, 8)] + ["Firma sp. z o.o."]
    result = detector.detect(["\n".join(lines)])
    assert result.name == "line 6"


def test_only_first_block_is_used(detector):
    result = detector.detect(["Kiosk", "\n".join(f"line {i}" for i in range(1, 9))])
    assert result.name == "Kiosk"


def test_exactly_five_lines_uses_first_line(detector):
    result = detector.detect(["\n".join(f"line {i}" for i in range(1, 6))])
    assert result.name == "line 1"


def test_empty_input(detector):
    assert detector.detect([]).name == ""
    assert detector.detect([""]).name == ""
