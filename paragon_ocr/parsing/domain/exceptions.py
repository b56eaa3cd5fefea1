"""
Исключения для домена Parsing.

Ядро парсинга (экстракторы, реконструктор товаров, сборщик чека) исключений
не бросает. Эти ошибки возникают только на границах: конфигурация,
файловая система и формат входных данных.
"""


class ParsingError(Exception):
    """Базовое исключение для ошибок домена Parsing."""

    def __init__(self, message: str, component: str = None, original_error: Exception = None):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Parsing Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class ParsingConfigurationError(ParsingError):
    """Ошибка конфигурации домена Parsing (локали, settings)."""
    pass


class ParsingDataFormatError(ParsingError):
    """Ошибка формата данных (нет ни текста, ни сущностей)."""
    pass


class ParsingFileSystemError(ParsingError):
    """Ошибка файловой системы в домене Parsing."""
    pass


class ParsingFileNotFoundError(ParsingFileSystemError):
    """Файл не найден в домене Parsing."""
    pass


class ParsingFileWriteError(ParsingFileSystemError):
    """Ошибка записи файла в домене Parsing."""
    pass
