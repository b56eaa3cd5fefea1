"""
Интерфейсы (абстрактные классы) для домена Parsing.

Домен Parsing отвечает за:
1. Восстановление чека из упорядоченных строк OCR (эвристический парсер)
2. Свертку готовых сущностей экстрактора в чек (entity-режим)
3. Пакетную обработку и сохранение результатов
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from contracts.raw_ocr_schema import DocumentEntity
    from ..parser.trace import ParseResult


class IReceiptParser(ABC):
    """Интерфейс для эвристического парсера чеков."""

    @abstractmethod
    def parse(self, texts: Sequence[str]) -> "ParseResult":
        """
        Восстанавливает чек из распознанного текста.

        Args:
            texts: Упорядоченные блоки текста OCR (сверху вниз)

        Returns:
            ParseResult: чек + трасса анализа
        """
        pass


class IEntityReducer(ABC):
    """Интерфейс для свертки сущностей структурного экстрактора."""

    @abstractmethod
    def reduce(
        self,
        entities: List["DocumentEntity"],
        raw_text: Sequence[str],
        instructions: str = ""
    ) -> "ParseResult":
        """
        Собирает чек из заранее классифицированных сущностей.

        Args:
            entities: Сущности (тип, уверенность, текст, свойства)
            raw_text: Распознанный текст документа
            instructions: Свободная инструкция клиента

        Returns:
            ParseResult: чек + трасса анализа
        """
        pass


class IParsingPipeline(ABC):
    """Интерфейс для пайплайна parsing (домен Parsing)."""

    @abstractmethod
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
            Структурированные данные чека
        """
        pass

    @abstractmethod
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
        pass
