"""
Корпус строк: RecognizedText -> плоский список строк.

Блок OCR может содержать несколько строк (например, весь текст документа
одним блоком). Порядок сохраняется как есть: эвристика "предыдущая строка -
название товара" предполагает, что распознаватель отдает текст в порядке
чтения. Если текст упорядочен по-другому (по позиции блоков), результаты
тихо деградируют - это не исправляется здесь.
"""

from typing import List, Sequence


def split_lines(texts: Sequence[str]) -> List[str]:
    """Разбивает блоки на строки, пустые строки сохраняются."""
    lines: List[str] = []
    for block in texts:
        if block is None:
            continue
        lines.extend(str(block).splitlines() or [""])
    return lines


def first_block_lines(texts: Sequence[str]) -> List[str]:
    """Строки первого блока (для эвристики магазина)."""
    for block in texts:
        if block is None:
            continue
        return str(block).splitlines()
    return []
