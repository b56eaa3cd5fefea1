"""
DTO контракт: Parsing -> клиент

Результат восстановления структуры чека. Создается заново на каждый запрос,
собирается целиком и после сериализации не изменяется.
"""

from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReceiptItem(BaseModel):
    """
    Купленный товар, восстановленный из строки чека или из сущности line_item.
    """

    name: str = Field(..., min_length=1, description="Название товара как извлечено из чека")
    price: Decimal = Field(Decimal("0"), ge=0, description="Итоговая цена за позицию")
    quantity: int = Field(1, ge=1, description="Количество (1 если не удалось извлечь)")
    category: str = Field("Other", description="Категория товара")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Item name must not be blank")
        return v


class ReceiptEntityField(BaseModel):
    """Сущность экстрактора "как есть" - запись происхождения данных."""

    name: str = Field(..., description="Тип сущности, выданный экстрактором")
    confidence: float = Field(0.0, ge=0.0, le=1.0, description="Уверенность экстрактора")
    value: str = Field("", description="Текст сущности")

    model_config = ConfigDict(frozen=True)


class Receipt(BaseModel):
    """
    Структурированный чек.

    total_amount == 0 означает "сумма не найдена", а не покупку на ноль.
    Порядок items - порядок обнаружения в тексте OCR.
    """

    merchant: str = Field("", description="Название магазина/продавца")
    date: str = Field("", description="Дата чека в формате локали (как в тексте)")
    total_amount: Decimal = Field(Decimal("0"), ge=0, description="Итоговая сумма чека")
    items: List[ReceiptItem] = Field(default_factory=list, description="Товары по порядку обнаружения")
    raw_text: List[str] = Field(default_factory=list, description="Исходный RecognizedText")
    fields: List[ReceiptEntityField] = Field(
        default_factory=list, description="Сущности экстрактора (только entity-режим)"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def has_total(self) -> bool:
        return self.total_amount > 0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-совместимый словарь; суммы сериализуются десятичными строками."""
        return self.model_dump(mode="json")
