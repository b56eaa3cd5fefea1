"""
Интеграционные тесты домена Parsing.

End-to-end: JSON файл OCR -> ParsingPipeline -> parsed_results.json + analysis_trace.json.
"""

import json

import pytest
from paragon_ocr.parsing.application.parsing_pipeline import ParsingPipeline
from paragon_ocr.parsing.domain.exceptions import (
    ParsingDataFormatError,
    ParsingError,
    ParsingFileNotFoundError,
)

RAW_OCR = {
    "full_text": "",
    "blocks": [
        {"text": "Biedronka\nul. Prosta 1\n00-001 Warszawa", "confidence": 0.98},
        {"text": "2024-03-15"},
        {"text": "Milk"},
        {"text": "1 x3,99 3,99C"},
        {"text": "Bread"},
        {"text": "2 ×2,49 4,98C"},
        {"text": "SUMA PLN 8,97"},
    ],
    "metadata": {"timestamp": "2024-03-15T14:22:00", "source_file": "PL_001"},
}

DOCUMENT = {
    "document": {
        "text": "Kiosk\nMilk\n1 x3,99 3,99C\n45,67",
        "entities": [
            {"type": "receipt_merchant_name", "confidence": 0.97, "mentionText": "Kiosk"},
            {"type": "receipt_date", "confidence": 0.9, "mentionText": "2024-03-15"},
        ],
    }
}


def write_json(path, data):
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def pipeline(tmp_path):
    return ParsingPipeline(output_dir=tmp_path / "output")


class TestProcessOcrData:
    """Обработка словаря с данными OCR."""

    def test_heuristic_mode(self, pipeline):
        result = pipeline.process_ocr_data(RAW_OCR, source_file="PL_001")

        assert result["mode"] == "heuristic"
        assert result["source_file"] == "PL_001"
        receipt = result["receipt"]
        assert receipt["merchant"] == "Biedronka"
        assert receipt["date"] == "2024-03-15"
        assert receipt["total_amount"] == "8.97"
        assert [item["name"] for item in receipt["items"]] == ["Milk", "Bread"]
        assert result["analysis_trace"]["mode"] == "heuristic"

    def test_service_response_format(self, pipeline):
        data = {"success": True, "text": ["Milk", "1 x3,99 3,99C"]}
        result = pipeline.process_ocr_data(data)
        assert len(result["receipt"]["items"]) == 1

    def test_entity_mode_with_fallback(self, pipeline):
        result = pipeline.process_ocr_data(DOCUMENT, instructions="shop receipt")

        assert result["mode"] == "entity"
        receipt = result["receipt"]
        assert receipt["merchant"] == "Kiosk"
        assert receipt["total_amount"] == "45.67"
        assert [item["name"] for item in receipt["items"]] == ["Milk"]
        assert [f["name"] for f in receipt["fields"]] == ["receipt_merchant_name", "receipt_date"]

    def test_entity_mode_without_instruction(self, pipeline):
        result = pipeline.process_ocr_data(DOCUMENT)
        assert result["receipt"]["items"] == []
        assert result["receipt"]["total_amount"] == "0"

    def test_no_text_no_entities_raises(self, pipeline):
        with pytest.raises(ParsingDataFormatError):
            pipeline.process_ocr_data({"full_text": "", "blocks": []})

        with pytest.raises(ParsingDataFormatError):
            pipeline.process_ocr_data({"document": {"text": "", "entities": []}})

    def test_same_input_same_output(self, pipeline):
        first = pipeline.process_ocr_data(RAW_OCR, source_file="PL_001")
        second = pipeline.process_ocr_data(RAW_OCR, source_file="PL_001")
        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


class TestProcessOcrFile:
    """Обработка файлов и сохранение результатов."""

    def test_results_saved(self, pipeline, tmp_path):
        ocr_file = write_json(tmp_path / "raw_ocr.json", RAW_OCR)

        result = pipeline.process_ocr_file(ocr_file)

        # source_file берется из metadata
        out_dir = tmp_path / "output" / "PL_001"
        saved = json.loads((out_dir / "parsed_results.json").read_text(encoding="utf-8"))
        trace = json.loads((out_dir / "analysis_trace.json").read_text(encoding="utf-8"))
        assert saved == result["receipt"]
        assert trace["steps"]

    def test_save_disabled(self, pipeline, tmp_path):
        ocr_file = write_json(tmp_path / "receipt.json", {"text": ["Milk"]})
        pipeline.process_ocr_file(ocr_file, save_output=False)
        assert not (tmp_path / "output").exists()

    def test_source_file_from_name(self, pipeline, tmp_path):
        ocr_file = write_json(tmp_path / "receipt_42.json", {"text": ["Milk"]})
        assert pipeline.process_ocr_file(ocr_file)["source_file"] == "receipt_42"

    def test_missing_file(self, pipeline, tmp_path):
        with pytest.raises(ParsingFileNotFoundError):
            pipeline.process_ocr_file(tmp_path / "missing.json")

    def test_invalid_json(self, pipeline, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with pytest.raises(ParsingError):
            pipeline.process_ocr_file(broken)


class TestBatchProcess:
    """Пакетная обработка директории."""

    def test_batch_continues_after_failure(self, pipeline, tmp_path):
        input_dir = tmp_path / "input"
        input_dir.mkdir()
        write_json(input_dir / "a.json", {"text": ["Milk", "1 x3,99 3,99C"]})
        write_json(input_dir / "b.json", {"blocks": []})
        write_json(input_dir / "c.json", DOCUMENT)

        stats = pipeline.batch_process(input_dir, output_dir=tmp_path / "batch", instructions="shop receipt")

        assert stats["processed"] == 3
        assert stats["success"] == 2
        assert stats["failed"] == 1
        assert [f["status"] for f in stats["files"]] == ["success", "failed", "success"]
        assert (tmp_path / "batch" / "a" / "parsed_results.json").exists()
        assert (tmp_path / "batch" / "c" / "parsed_results.json").exists()

    def test_empty_directory(self, pipeline, tmp_path):
        stats = pipeline.batch_process(tmp_path / "nothing")
        assert stats == {"processed": 0, "success": 0, "failed": 0, "files": []}
