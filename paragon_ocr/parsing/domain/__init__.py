"""
Domain слой домена Parsing.

Содержит интерфейсы (абстрактные классы) и исключения для Parsing домена.
"""

from .interfaces import (
    IReceiptParser,
    IEntityReducer,
    IParsingPipeline,
)

from .exceptions import (
    ParsingError,
    ParsingConfigurationError,
    ParsingDataFormatError,
    ParsingFileSystemError,
    ParsingFileNotFoundError,
    ParsingFileWriteError,
)

__all__ = [
    # Интерфейсы
    "IReceiptParser",
    "IEntityReducer",
    "IParsingPipeline",

    # Исключения
    "ParsingError",
    "ParsingConfigurationError",
    "ParsingDataFormatError",
    "ParsingFileSystemError",
    "ParsingFileNotFoundError",
    "ParsingFileWriteError",
]
