"""
Менеджер файлов для домена Parsing.

Реализует файловые операции специфичные для домена Parsing.
"""

import json
from pathlib import Path
from typing import Dict, Any, List
from loguru import logger

from ..domain.exceptions import ParsingFileNotFoundError, ParsingFileWriteError

PARSED_RESULTS_FILE = "parsed_results.json"
ANALYSIS_TRACE_FILE = "analysis_trace.json"


class ParsingFileManager:
    """Менеджер файлов для домена Parsing."""

    def save_json(self, data: Dict[str, Any], file_path: Path) -> Path:
        """
        Сохраняет данные в JSON файл.

        Args:
            data: Данные для сохранения
            file_path: Путь для сохранения

        Returns:
            Путь к сохраненному файлу

        Raises:
            ParsingFileWriteError: Если не удалось сохранить файл
        """
        try:
            # Создаем директорию если не существует
            file_path.parent.mkdir(parents=True, exist_ok=True)

            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)

            logger.debug(f"[Parsing] Файл сохранен: {file_path}")
            return file_path

        except (IOError, OSError, TypeError) as e:
            raise ParsingFileWriteError(
                message=f"Не удалось сохранить JSON файл: {file_path}",
                component="ParsingFileManager",
                original_error=e
            )

    def load_json(self, file_path: Path) -> Dict[str, Any]:
        """
        Загружает данные из JSON файла.

        Raises:
            ParsingFileNotFoundError: Если файл не существует
            ParsingFileWriteError: Если не удалось прочитать файл
        """
        if not file_path.exists():
            raise ParsingFileNotFoundError(
                message=f"Файл не найден: {file_path}",
                component="ParsingFileManager"
            )

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (IOError, OSError, json.JSONDecodeError) as e:
            raise ParsingFileWriteError(
                message=f"Не удалось загрузить JSON файл: {file_path}",
                component="ParsingFileManager",
                original_error=e
            )

        logger.debug(f"[Parsing] Файл загружен: {file_path}")
        return data

    def ensure_directory(self, directory_path: Path) -> Path:
        """Создает директорию если она не существует."""
        try:
            directory_path.mkdir(parents=True, exist_ok=True)
            return directory_path

        except (IOError, OSError) as e:
            raise ParsingFileWriteError(
                message=f"Не удалось создать директорию: {directory_path}",
                component="ParsingFileManager",
                original_error=e
            )

    def save_parsing_result(
        self,
        receipt_data: Dict[str, Any],
        trace_data: Dict[str, Any],
        output_dir: Path
    ) -> Dict[str, Path]:
        """
        Сохраняет чек и трассу анализа в стандартном формате.

        Args:
            receipt_data: Сериализованный Receipt
            trace_data: Сериализованная AnalysisTrace
            output_dir: Директория исходного файла (<output>/<source_file>)

        Returns:
            Словарь с путями к сохраненным файлам
        """
        self.ensure_directory(output_dir)

        receipt_path = self.save_json(receipt_data, output_dir / PARSED_RESULTS_FILE)
        trace_path = self.save_json(trace_data, output_dir / ANALYSIS_TRACE_FILE)

        logger.debug(f"[Parsing] Результаты сохранены: {receipt_path}")

        return {
            "receipt": receipt_path,
            "trace": trace_path
        }

    def get_ocr_files(self, directory_path: Path) -> List[Path]:
        """
        Получает список файлов с OCR данными в директории.

        Returns:
            Отсортированный список путей к файлам (.json)
        """
        if not directory_path.exists():
            return []

        return sorted(p for p in directory_path.glob('*.json') if p.is_file())
