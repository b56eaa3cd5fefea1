"""
Config Loader для конфигураций локалей парсинга.

ЦКП: Загрузка единой модели LocaleConfig для локали.

Архитектурный принцип:
- Единая модель LocaleConfig для всех локалей
- LocaleConfig = metadata_config + semantic_config
- ConfigLoader загружает и собирает LocaleConfig из YAML файлов
"""

import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional, ClassVar, Tuple
from dataclasses import dataclass
from loguru import logger

from ..domain.exceptions import ParsingConfigurationError


@dataclass(frozen=True)
class CategoryRule:
    """Категория товара и ее ключевые подстроки (в нижнем регистре)."""
    name: str
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class MetadataConfig:
    """
    Конфигурация для извлечения полей чека.

    Содержит ключевые слова итоговой суммы, маркеры юрлица и форматы дат.
    """
    total_keywords: Tuple[str, ...]
    merchant_suffixes: Tuple[str, ...] = ()
    date_formats: Tuple[str, ...] = ()
    standalone_total_min: Optional[float] = None


@dataclass(frozen=True)
class SemanticConfig:
    """
    Конфигурация для восстановления товаров.

    - skip_keywords: Слова, которые НЕ являются товарами
    - categories: Категории в порядке приоритета
    - currency_symbols: Обозначения валюты в строке товара ("zł")
    """
    skip_keywords: Tuple[str, ...]
    categories: Tuple[CategoryRule, ...] = ()
    currency_symbols: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LocaleConfig:
    """
    Единая конфигурация локали для парсинга.

    Объединяет MetadataConfig и SemanticConfig.
    Неизменяема (frozen) и кешируется по коду локали: один экземпляр
    разделяется всеми парсерами.
    """
    locale_code: str
    currency: str

    metadata: MetadataConfig
    semantic: SemanticConfig

    # Внутренние поля (кеш и директория)
    _config_dir: ClassVar[Optional[Path]] = None
    _cache: ClassVar[Dict[str, "LocaleConfig"]] = {}

    @property
    def total_keywords(self) -> Tuple[str, ...]:
        return self.metadata.total_keywords

    @property
    def merchant_suffixes(self) -> Tuple[str, ...]:
        return self.metadata.merchant_suffixes

    @property
    def date_formats(self) -> Tuple[str, ...]:
        return self.metadata.date_formats

    @property
    def standalone_total_min(self) -> Optional[float]:
        return self.metadata.standalone_total_min

    @property
    def skip_keywords(self) -> Tuple[str, ...]:
        return self.semantic.skip_keywords

    @property
    def categories(self) -> Tuple[CategoryRule, ...]:
        return self.semantic.categories

    @property
    def currency_tokens(self) -> Tuple[str, ...]:
        """Код валюты и ее обозначения ("PLN", "zł") без повторов."""
        tokens = [self.currency] + list(self.semantic.currency_symbols)
        return tuple(dict.fromkeys(t for t in tokens if t))

    @classmethod
    def load(cls, locale_code: str, config_dir: Optional[Path] = None) -> "LocaleConfig":
        """
        Загружает конфигурацию локали из YAML файлов.

        Raises:
            ParsingConfigurationError: Если конфиг не найден или невалиден
        """
        directory = Path(config_dir or cls._config_dir or Path(__file__).parent)
        cache_key = f"{directory}:{locale_code}"

        # Проверяем кеш
        if cache_key in cls._cache:
            return cls._cache[cache_key]

        locale_config = cls._load_locale_yaml(directory, locale_code)
        cls._cache[cache_key] = locale_config

        logger.debug(
            f"[ConfigLoader] Загружен LocaleConfig для {locale_code}: "
            f"{len(locale_config.metadata.total_keywords)} total_keywords, "
            f"{len(locale_config.semantic.skip_keywords)} skip_keywords, "
            f"{len(locale_config.semantic.categories)} categories"
        )

        return locale_config

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()

    @classmethod
    def _load_base_config(cls, config_dir: Path) -> dict:
        """Загружает базовую конфигурацию из base.yaml."""
        base_file = config_dir / "base.yaml"

        if not base_file.exists():
            logger.warning(f"[ConfigLoader] base.yaml не найден: {base_file}")
            return {}

        with open(base_file, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def _resolve_extends(cls, value: Any, base_config: dict) -> Any:
        """
        Обрабатывает наследование через $extends для списков.
        Поддерживает форматы:
        - Строка: "$extends: key"
        - Словарь: {"$extends": "key"} (автоматически из YAML без кавычек)
        """
        if not isinstance(value, list):
            return value

        result = []
        for item in value:
            extended_key = None

            if isinstance(item, str) and item.startswith("$extends:"):
                extended_key = item.split(":", 1)[1].strip()
            elif isinstance(item, dict) and "$extends" in item:
                extended_key = item["$extends"]

            if extended_key:
                extended = base_config.get(extended_key, [])
                if not extended:
                    logger.warning(f"[ConfigLoader] Ключ '{extended_key}' для $extends не найден в base.yaml")
                result.extend(e for e in extended if e not in result)
            elif item not in result:
                result.append(item)

        return result

    @classmethod
    def _parse_categories(cls, raw: Any, config_file: Path) -> Tuple[CategoryRule, ...]:
        """Категории должны быть списком: порядок задает приоритет."""
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise ParsingConfigurationError(
                message=f"categories должен быть упорядоченным списком в {config_file}",
                component="ConfigLoader"
            )

        rules = []
        for entry in raw:
            if not isinstance(entry, dict) or "name" not in entry:
                raise ParsingConfigurationError(
                    message=f"Некорректная категория {entry!r} в {config_file}",
                    component="ConfigLoader"
                )
            keywords = tuple(str(kw).lower() for kw in entry.get("keywords", []) or [])
            rules.append(CategoryRule(name=str(entry["name"]), keywords=keywords))
        return tuple(rules)

    @classmethod
    def _load_locale_yaml(cls, config_dir: Path, locale_code: str) -> "LocaleConfig":
        """Загружает конфиг локали из YAML файла."""
        base_config = cls._load_base_config(config_dir)

        config_file = config_dir / locale_code / "parsing.yaml"

        if not config_file.exists():
            raise ParsingConfigurationError(
                message=f"Конфиг для {locale_code} не найден: {config_file}",
                component="ConfigLoader"
            )

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ParsingConfigurationError(
                message=f"Невалидный YAML: {config_file}",
                component="ConfigLoader",
                original_error=e
            )

        # Валидация обязательных полей
        for required in ("locale_code", "currency"):
            if required not in config_data:
                raise ParsingConfigurationError(
                    message=f"Отсутствует {required} в {config_file}",
                    component="ConfigLoader"
                )

        standalone_min = config_data.get("standalone_total_min")
        metadata_config = MetadataConfig(
            total_keywords=tuple(cls._resolve_extends(config_data.get("total_keywords", ["total"]), base_config)),
            merchant_suffixes=tuple(cls._resolve_extends(config_data.get("merchant_suffixes", []), base_config)),
            date_formats=tuple(cls._resolve_extends(config_data.get("date_formats", []), base_config)),
            standalone_total_min=float(standalone_min) if standalone_min is not None else None,
        )

        semantic_config = SemanticConfig(
            skip_keywords=tuple(cls._resolve_extends(config_data.get("skip_keywords", []), base_config)),
            categories=cls._parse_categories(config_data.get("categories"), config_file),
            currency_symbols=tuple(str(s) for s in config_data.get("currency_symbols", []) or []),
        )

        return LocaleConfig(
            locale_code=config_data["locale_code"],
            currency=config_data["currency"],
            metadata=metadata_config,
            semantic=semantic_config,
        )


class ConfigLoader:
    """
    Загрузчик конфигураций.
    Обертка над LocaleConfig.load для совместимости с DI.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir

    def load(self, locale_code: str) -> LocaleConfig:
        return LocaleConfig.load(locale_code, self.config_dir)
