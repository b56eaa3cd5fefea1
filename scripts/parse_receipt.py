#!/usr/bin/env python3
"""
Точка входа для домена Parsing (восстановление чека из текста OCR).

Использование:
    # Обработать все JSON файлы из data/input/
    python scripts/parse_receipt.py

    # Обработать конкретный файл (raw OCR или документ с сущностями)
    python scripts/parse_receipt.py path/to/receipt.json

    # Директория + инструкция для entity-режима
    python scripts/parse_receipt.py path/to/dir --instructions "shop receipt" --output out/
"""

import sys
import argparse
from pathlib import Path

from loguru import logger

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import INPUT_DIR, OUTPUT_DIR, LOG_LEVEL, validate_config
from paragon_ocr.parsing.application import ParsingPipeline
from paragon_ocr.parsing.domain.exceptions import ParsingError


def setup_logging(verbose: bool = False) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="DEBUG" if verbose else LOG_LEVEL
    )


def print_receipt(result: dict) -> None:
    receipt = result["receipt"]
    print(f"  [INFO]  Режим: {result['mode']}")
    print(f"  [INFO]  Магазин: {receipt['merchant'] or '-'}")
    print(f"  [INFO]  Дата: {receipt['date'] or '-'}")
    print(f"  [INFO]  Сумма: {receipt['total_amount']}")
    print(f"  [INFO]  Извлечено: {len(receipt['items'])} товаров")
    for item in receipt["items"]:
        print(f"          - {item['name']} x{item['quantity']} {item['price']} [{item['category']}]")


def main() -> int:
    """Главная функция запуска домена Parsing."""

    print("\n" + "=" * 60)
    print("  PARAGON OCR - Домен Parsing (восстановление чека)")
    print("=" * 60)

    parser = argparse.ArgumentParser(description="Paragon OCR Parsing Domain")
    parser.add_argument("path", nargs="?", help="JSON файл с OCR данными или директория (по умолчанию data/input)")
    parser.add_argument("--instructions", default="", help="Инструкция клиента (например, 'shop receipt')")
    parser.add_argument("--output", help="Директория для результатов (по умолчанию data/output)")
    parser.add_argument("--verbose", action="store_true", help="Подробный лог (DEBUG)")
    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        validate_config()
    except ValueError as e:
        print(f"[ERROR] Некорректная конфигурация:\n{e}")
        return 1

    input_path = Path(args.path) if args.path else INPUT_DIR
    output_dir = Path(args.output) if args.output else OUTPUT_DIR

    pipeline = ParsingPipeline(output_dir=output_dir)

    if input_path.is_file():
        print(f"\n[PROCESSING] Обработка одного файла: {input_path}")
        try:
            result = pipeline.process_ocr_file(input_path, instructions=args.instructions)
        except ParsingError as e:
            print(f"  [ERROR] {e}")
            return 1
        print_receipt(result)
        print(f"  [SAVED] {output_dir / result['source_file']}")
        return 0

    if not input_path.is_dir():
        print(f"[ERROR] Неверный путь: {input_path}")
        print("  Ожидается: JSON файл или директория")
        return 1

    print(f"\n[PROCESSING] Обработка файлов из {input_path}")
    stats = pipeline.batch_process(input_path, output_dir=output_dir, instructions=args.instructions)

    for entry in stats["files"]:
        status = "OK" if entry["status"] == "success" else "FAILED"
        print(f"  [{status}] {entry['file']}")

    # Итоги
    print("\n" + "=" * 60)
    print(f"  ИТОГИ: {stats['success']}/{stats['processed']} успешно обработано")

    if stats["failed"]:
        print(f"  [WARNING] {stats['failed']} файлов не обработано")
        return 1

    print("  [SUCCESS] Все файлы обработаны успешно!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
