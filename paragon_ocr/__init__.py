"""Paragon OCR - восстановление структуры кассового чека из текста OCR."""

__version__ = "0.3.0"
