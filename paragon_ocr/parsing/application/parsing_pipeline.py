"""
Пайплайн для домена Parsing.

Обрабатывает сырые данные OCR через:
1. Выбор режима: сущности экстрактора есть -> entity, иначе -> heuristic
2. Парсинг чека (ReceiptParser / EntityReducer)
3. Сохранение чека и трассы анализа
"""

from pathlib import Path
from typing import Dict, Any, Optional
from loguru import logger

from contracts.raw_ocr_schema import RawDocumentResult, RawOCRResult
from ..domain.interfaces import IParsingPipeline, IReceiptParser, IEntityReducer
from ..domain.exceptions import ParsingError, ParsingDataFormatError, ParsingFileNotFoundError
from ..infrastructure.file_manager import ParsingFileManager
from ..parser.trace import ParseResult

MODE_HEURISTIC = "heuristic"
MODE_ENTITY = "entity"


class ParsingPipeline(IParsingPipeline):
    """
    Пайплайн домена Parsing.

    Координирует:
    1. Определение режима и загрузку входного контракта
    2. Парсинг чека
    3. Сохранение структурированных результатов
    """

    def __init__(
        self,
        receipt_parser: Optional[IReceiptParser] = None,
        entity_reducer: Optional[IEntityReducer] = None,
        file_manager: Optional[ParsingFileManager] = None,
        output_dir: Optional[Path] = None
    ):
        """
        Инициализация пайплайна parsing.

        Args:
            receipt_parser: Эвристический парсер (по умолчанию ReceiptParser)
            entity_reducer: Свертка сущностей (по умолчанию EntityReducer)
            file_manager: Менеджер файлов (опционально)
            output_dir: Директория для сохранения структурированных результатов
        """
        if receipt_parser is None or entity_reducer is None:
            # Импортируем здесь, чтобы не загружать локаль при внедрении своих компонентов
            from ..parser import EntityReducer, ReceiptParser
            receipt_parser = receipt_parser or ReceiptParser()
            entity_reducer = entity_reducer or EntityReducer()

        self.receipt_parser = receipt_parser
        self.entity_reducer = entity_reducer
        self.file_manager = file_manager or ParsingFileManager()
        self.output_dir = output_dir

        logger.info("[Parsing] ParsingPipeline инициализирован")

    @staticmethod
    def detect_mode(ocr_data: Dict[str, Any]) -> str:
        """entity, если во входе есть список сущностей (в т.ч. внутри "document")."""
        document = ocr_data.get("document")
        if "entities" in ocr_data or (isinstance(document, dict) and "entities" in document):
            return MODE_ENTITY
        return MODE_HEURISTIC

    def process_ocr_data(
        self,
        ocr_data: Dict[str, Any],
        source_file: str = "",
        instructions: str = ""
    ) -> Dict[str, Any]:
        """
        Обрабатывает сырые данные OCR через полный пайплайн parsing.

        Args:
            ocr_data: Сырые данные OCR (raw_ocr или документ с сущностями)
            source_file: Имя исходного файла
            instructions: Свободная инструкция клиента

        Returns:
            {"receipt", "analysis_trace", "source_file", "mode"}

        Raises:
            ParsingDataFormatError: Нет ни текста, ни сущностей
            ParsingError: Любая другая ошибка пайплайна
        """
        try:
            logger.info(f"[Parsing] Начало обработки OCR данных: {source_file}")

            mode = self.detect_mode(ocr_data)
            logger.debug(f"[Parsing] Режим: {mode}")

            result = self._parse(ocr_data, mode, source_file, instructions)

            logger.info(
                f"[Parsing] Обработка завершена успешно: {source_file} "
                f"(items={len(result.receipt.items)}, total={result.receipt.total_amount})"
            )

            output = result.to_dict()
            output["source_file"] = source_file
            output["mode"] = mode
            return output

        except ParsingError as e:
            logger.error(f"[Parsing] Ошибка в пайплайне parsing: {e}")
            raise
        except Exception as e:
            logger.error(f"[Parsing] Неожиданная ошибка: {e}")
            raise ParsingError(
                message=f"Неожиданная ошибка при обработке OCR данных: {source_file}",
                component="ParsingPipeline",
                original_error=e
            )

    def _parse(self, ocr_data: Dict[str, Any], mode: str, source_file: str, instructions: str) -> ParseResult:
        if mode == MODE_ENTITY:
            document = RawDocumentResult.from_dict(ocr_data)
            texts = document.texts()
            if not texts and not document.entities:
                raise ParsingDataFormatError(
                    message=f"Документ без текста и без сущностей: {source_file}",
                    component="ParsingPipeline"
                )
            return self.entity_reducer.reduce(document.entities, texts, instructions)

        raw_ocr = RawOCRResult.from_dict(ocr_data)
        texts = raw_ocr.texts()
        if not texts:
            raise ParsingDataFormatError(
                message=f"Нет распознанного текста: {source_file}",
                component="ParsingPipeline"
            )
        return self.receipt_parser.parse(texts)

    def process_ocr_file(
        self,
        ocr_file_path: Path,
        instructions: str = "",
        save_output: bool = True
    ) -> Dict[str, Any]:
        """
        Обрабатывает файл с OCR данными через полный пайплайн parsing.

        Args:
            ocr_file_path: Путь к JSON файлу с OCR данными
            instructions: Свободная инструкция клиента
            save_output: Сохранять ли структурированный результат

        Returns:
            Структурированные данные чека
        """
        return self._process_file(ocr_file_path, instructions, self.output_dir if save_output else None)

    def _process_file(self, ocr_file_path: Path, instructions: str, output_dir: Optional[Path]) -> Dict[str, Any]:
        try:
            logger.info(f"[Parsing] Обработка OCR файла: {ocr_file_path}")

            # Проверяем существование файла
            if not ocr_file_path.exists():
                raise ParsingFileNotFoundError(
                    message=f"OCR файл не найден: {ocr_file_path}",
                    component="ParsingPipeline"
                )

            ocr_data = self.file_manager.load_json(ocr_file_path)
            if not isinstance(ocr_data, dict):
                raise ParsingDataFormatError(
                    message=f"Ожидался JSON объект: {ocr_file_path}",
                    component="ParsingPipeline"
                )

            # Извлекаем source_file из metadata или имени файла
            source_file = (ocr_data.get("metadata") or {}).get("source_file") or ocr_file_path.stem

            parsing_result = self.process_ocr_data(ocr_data, source_file, instructions)

            if output_dir:
                self._save_parsing_result(parsing_result, output_dir / source_file)

            return parsing_result

        except ParsingError:
            raise
        except Exception as e:
            raise ParsingError(
                message=f"Ошибка при обработке OCR файла: {ocr_file_path}",
                component="ParsingPipeline",
                original_error=e
            )

    def _save_parsing_result(self, result_data: Dict[str, Any], output_subdir: Path) -> None:
        """Сохраняет результат parsing."""
        try:
            self.file_manager.save_parsing_result(
                result_data["receipt"], result_data["analysis_trace"], output_subdir
            )
            logger.info(f"[Parsing] Результат parsing сохранен в: {output_subdir}")

        except ParsingError as e:
            # Не прерываем выполнение из-за ошибки сохранения
            logger.warning(f"[Parsing] Не удалось сохранить результат parsing: {e}")

    def batch_process(
        self,
        input_dir: Path,
        output_dir: Optional[Path] = None,
        instructions: str = ""
    ) -> Dict[str, Any]:
        """
        Обрабатывает все OCR файлы в директории.

        Args:
            input_dir: Директория с OCR файлами (*.json)
            output_dir: Директория для сохранения результатов (опционально)
            instructions: Свободная инструкция клиента (для всех файлов)

        Returns:
            Статистика обработки
        """
        logger.info(f"[Parsing] Пакетная обработка OCR файлов из: {input_dir}")

        results = {
            "processed": 0,
            "success": 0,
            "failed": 0,
            "files": []
        }

        ocr_files = self.file_manager.get_ocr_files(input_dir)
        if not ocr_files:
            logger.warning(f"[Parsing] В директории нет OCR файлов: {input_dir}")
            return results

        logger.info(f"[Parsing] Найдено OCR файлов: {len(ocr_files)}")

        # Используем указанную output_dir или дефолтную
        target_output_dir = output_dir or self.output_dir

        for ocr_file in ocr_files:
            try:
                logger.debug(f"[Parsing] Обработка: {ocr_file.name}")
                parsing_result = self._process_file(ocr_file, instructions, target_output_dir)

                results["success"] += 1
                results["files"].append({
                    "file": ocr_file.name,
                    "status": "success",
                    "source_file": parsing_result["source_file"],
                    "mode": parsing_result["mode"]
                })

            except ParsingError as e:
                logger.error(f"[Parsing] Ошибка при обработке {ocr_file.name}: {e}")
                results["failed"] += 1
                results["files"].append({
                    "file": ocr_file.name,
                    "status": "failed",
                    "error": str(e)
                })

            results["processed"] += 1

        logger.info(f"[Parsing] Пакетная обработка завершена: {results['success']} успешно, {results['failed']} с ошибками")
        return results
