"""
Контракт для сырых результатов OCR.

Этот модуль определяет структуру данных, которая передаётся
от внешнего распознавателя к домену parsing. Поддерживаются два вида входа:

- RawOCRResult: упорядоченные текстовые блоки (RecognizedText)
- RawDocumentResult: текст документа + заранее классифицированные сущности
  (entity-режим, структурный экстрактор)

ВНИМАНИЕ: Это публичный контракт. Изменения должны быть обратно совместимы.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class TextBlock:
    """Текстовый блок из OCR результата (может содержать несколько строк)."""
    text: str
    confidence: float = 0.0
    block_type: str = "PARAGRAPH"


@dataclass(frozen=True)
class OCRMetadata:
    """Метаданные OCR процесса."""
    timestamp: str  # ISO format datetime string
    source_file: str  # Имя исходного файла без расширения


@dataclass
class RawOCRResult:
    """
    Сырой результат OCR: блоки текста в порядке чтения (сверху вниз).

    Порядок блоков значим: эвристики "предыдущая строка - название товара"
    полагаются на него.
    """
    full_text: str = ""
    blocks: List[TextBlock] = field(default_factory=list)
    metadata: Optional[OCRMetadata] = None

    def texts(self) -> List[str]:
        """
        Возвращает RecognizedText: тексты блоков по порядку.

        Если блоков нет, весь текст документа считается одним блоком.
        """
        if self.blocks:
            return [block.text for block in self.blocks]
        if self.full_text:
            return [self.full_text]
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь для сериализации в JSON."""
        return {
            "full_text": self.full_text,
            "blocks": [
                {
                    "text": block.text,
                    "confidence": block.confidence,
                    "block_type": block.block_type
                }
                for block in self.blocks
            ],
            "metadata": {
                "timestamp": self.metadata.timestamp,
                "source_file": self.metadata.source_file
            } if self.metadata else {}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawOCRResult":
        """
        Создает RawOCRResult из словаря (десериализация из JSON).

        Помимо "blocks" принимает ответ OCR-сервиса вида {"text": [...]}.
        """
        metadata = None
        if data.get("metadata"):
            metadata = OCRMetadata(
                timestamp=data["metadata"].get("timestamp", ""),
                source_file=data["metadata"].get("source_file", "")
            )

        blocks = []
        for block_data in data.get("blocks", []):
            blocks.append(TextBlock(
                text=block_data.get("text", ""),
                confidence=block_data.get("confidence", 0.0),
                block_type=block_data.get("block_type", "PARAGRAPH")
            ))

        # Ответ OCR-сервиса: {"success": true, "text": ["..."]}
        if not blocks and isinstance(data.get("text"), list):
            blocks = [TextBlock(text=str(t)) for t in data["text"]]

        return cls(
            full_text=data.get("full_text", ""),
            blocks=blocks,
            metadata=metadata
        )


@dataclass(frozen=True)
class EntityProperty:
    """Под-свойство составной сущности (например, line_item/price)."""
    type: str
    mention_text: str = ""
    confidence: float = 0.0


@dataclass(frozen=True)
class DocumentEntity:
    """Сущность, классифицированная внешним структурным экстрактором."""
    type: str
    confidence: float = 0.0
    mention_text: str = ""
    properties: List[EntityProperty] = field(default_factory=list)

    def property_text(self, property_type: str) -> str:
        """Текст первого под-свойства заданного типа ("" если нет)."""
        for prop in self.properties:
            if prop.type == property_type:
                return prop.mention_text
        return ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentEntity":
        """Принимает snake_case и camelCase ключи (mentionText, type_)."""
        return cls(
            type=_entity_type(data),
            confidence=float(data.get("confidence") or 0.0),
            mention_text=_mention_text(data),
            properties=[
                EntityProperty(
                    type=_entity_type(p),
                    mention_text=_mention_text(p),
                    confidence=float(p.get("confidence") or 0.0),
                )
                for p in data.get("properties", []) or []
            ]
        )


@dataclass
class RawDocumentResult:
    """Документ структурного экстрактора: полный текст + сущности."""
    text: str = ""
    entities: List[DocumentEntity] = field(default_factory=list)
    metadata: Optional[OCRMetadata] = None

    def texts(self) -> List[str]:
        """Текст документа как RecognizedText из одного блока."""
        return [self.text] if self.text else []

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawDocumentResult":
        """Создает RawDocumentResult из словаря (десериализация из JSON)."""
        # Экспорт документа иногда вложен в {"document": {...}}
        document = data.get("document", data)

        metadata = None
        if data.get("metadata"):
            metadata = OCRMetadata(
                timestamp=data["metadata"].get("timestamp", ""),
                source_file=data["metadata"].get("source_file", "")
            )

        text = document.get("text", "")
        if isinstance(text, list):
            text = "\n".join(str(t) for t in text)

        return cls(
            text=text or document.get("full_text", ""),
            entities=[DocumentEntity.from_dict(e) for e in document.get("entities", []) or []],
            metadata=metadata
        )


def _entity_type(data: Dict[str, Any]) -> str:
    return data.get("type") or data.get("type_") or ""


def _mention_text(data: Dict[str, Any]) -> str:
    return data.get("mention_text") or data.get("mentionText") or ""
