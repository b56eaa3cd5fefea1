"""
Настройки проекта Paragon OCR.

Значения можно переопределить через переменные окружения.
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
INPUT_DIR = DATA_DIR / "input"
OUTPUT_DIR = DATA_DIR / "output"

# Директория с YAML конфигурациями локалей
LOCALES_DIR = PROJECT_ROOT / "paragon_ocr" / "parsing" / "locales"

# =============================================================================
# НАСТРОЙКИ ЛОКАЛИ
# =============================================================================
# Локаль по умолчанию (польские кассовые чеки)
DEFAULT_LOCALE = os.getenv("PARAGON_LOCALE", "pl_PL")

# =============================================================================
# НАСТРОЙКИ METADATA / EXTRACTION
# =============================================================================
# Минимальная сумма для fallback-поиска итога (строка из одного числа).
# Подобрано эмпирически, чтобы отсечь цены отдельных товаров.
STANDALONE_TOTAL_MIN = float(os.getenv("STANDALONE_TOTAL_MIN", "10.00"))

# Эвристика магазина: первый блок длиннее этого числа строк считается "шапкой"
MERCHANT_MAX_HEADER_LINES = 5
# Номер строки (с 1), которая берется, если маркер юрлица не найден
MERCHANT_FALLBACK_LINE = 6

# Товары
DEFAULT_ITEM_QUANTITY = 1
DEFAULT_CATEGORY = "Other"

# =============================================================================
# ENTITY-РЕЖИМ
# =============================================================================
# Фраза в инструкции, означающая "это магазинный чек"
SHOP_RECEIPT_PHRASE = os.getenv("SHOP_RECEIPT_PHRASE", "shop receipt")

# =============================================================================
# ЛОГИРОВАНИЕ
# =============================================================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config():
    """Проверяет корректность конфигурации."""
    errors = []

    if STANDALONE_TOTAL_MIN < 0:
        errors.append(f"STANDALONE_TOTAL_MIN должен быть >= 0, получено: {STANDALONE_TOTAL_MIN}")

    if MERCHANT_FALLBACK_LINE <= MERCHANT_MAX_HEADER_LINES:
        errors.append(
            "MERCHANT_FALLBACK_LINE должен быть больше MERCHANT_MAX_HEADER_LINES "
            f"({MERCHANT_FALLBACK_LINE} <= {MERCHANT_MAX_HEADER_LINES})"
        )

    if DEFAULT_ITEM_QUANTITY < 1:
        errors.append(f"DEFAULT_ITEM_QUANTITY должен быть >= 1, получено: {DEFAULT_ITEM_QUANTITY}")

    if not (LOCALES_DIR / DEFAULT_LOCALE / "parsing.yaml").exists():
        errors.append(f"Конфиг локали не найден: {LOCALES_DIR / DEFAULT_LOCALE / 'parsing.yaml'}")

    if errors:
        raise ValueError("\n".join(errors))

    return True
