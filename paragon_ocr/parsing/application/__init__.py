"""
Application - входная точка домена Parsing (словарь/файл/директория).
"""

from .parsing_pipeline import ParsingPipeline, MODE_ENTITY, MODE_HEURISTIC

__all__ = ["ParsingPipeline", "MODE_ENTITY", "MODE_HEURISTIC"]
