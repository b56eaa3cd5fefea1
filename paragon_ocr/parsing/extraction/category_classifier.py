import re
from typing import List, Optional, Sequence, TYPE_CHECKING

from config.settings import DEFAULT_CATEGORY
from ..locales.config_loader import CategoryRule

if TYPE_CHECKING:
    from ..locales.config_loader import LocaleConfig


class CategoryClassifier:
    """
    Элемент-функция: Определяет категорию товара по ключевым словам.

    Ключевое слово совпадает только с начала слова ("ser" находит "Serek",
    но не "Deser"), поэтому короткие основы не цепляют чужие товары.

    Категории проверяются строго в порядке списка - это и есть приоритет:
    если название подходит под две категории, побеждает стоящая выше.
    Если ничего не совпало - DEFAULT_CATEGORY ("Other").
    """

    # Fallback, если нет locale_config (совпадает с pl_PL/parsing.yaml)
    DEFAULT_CATEGORIES: List[CategoryRule] = [
        CategoryRule("Household", (
            "papier", "płyn", "proszek", "mydło", "szampon", "ręcznik", "worki", "serwetk",
            "detergent", "soap", "shampoo", "napkin",
        )),
        CategoryRule("Dairy", (
            "mleko", "ser", "jogurt", "kefir", "masło", "śmietana", "twaróg",
            "milk", "cheese", "yogurt", "butter",
        )),
        CategoryRule("Meat", (
            "kiełbasa", "szynka", "mięso", "kurczak", "parówki", "boczek", "schab", "indyk",
            "chicken", "ham", "sausage", "beef",
        )),
        CategoryRule("Bakery", (
            "chleb", "bułka", "bagietka", "rogal", "pieczywo", "drożdżówka",
            "bread", "roll", "bun", "croissant",
        )),
        CategoryRule("Produce", (
            "jabłk", "banan", "pomidor", "ziemniak", "cebula", "ogórek", "marchew", "sałata", "cytryn",
            "apple", "banana", "tomato", "potato", "onion",
        )),
        CategoryRule("Beverages", (
            "woda", "sok", "napój", "cola", "piwo", "wino", "kawa", "herbata",
            "water", "juice", "beer", "coffee",
        )),
        CategoryRule("Sweets", (
            "czekolad", "deser", "baton", "cukierki", "ciastka", "wafel", "lody",
            "chocolate", "candy", "cookies",
        )),
    ]

    def __init__(
        self,
        categories: Optional[Sequence[CategoryRule]] = None,
        default_category: str = DEFAULT_CATEGORY
    ):
        rules = categories if categories else self.DEFAULT_CATEGORIES
        # Ключевые слова приводятся к casefold один раз
        self.categories = [
            CategoryRule(rule.name, tuple(kw.casefold() for kw in rule.keywords if kw))
            for rule in rules
        ]
        self._patterns = [
            (rule.name, self._word_start_pattern(rule.keywords))
            for rule in self.categories
            if rule.keywords
        ]
        self.default_category = default_category

    @staticmethod
    def _word_start_pattern(keywords: Sequence[str]) -> re.Pattern:
        alternatives = "|".join(re.escape(kw) for kw in sorted(keywords, key=len, reverse=True))
        return re.compile(rf"(?<!\w)(?:{alternatives})")

    @classmethod
    def from_locale(cls, locale_config: Optional["LocaleConfig"]) -> "CategoryClassifier":
        if locale_config is None:
            return cls()
        return cls(categories=locale_config.categories)

    @property
    def priority(self) -> List[str]:
        """Имена категорий в порядке приоритета."""
        return [rule.name for rule in self.categories]

    def classify(self, description: Optional[str]) -> str:
        """
        ЦКП: Название категории. Тотальная функция, никогда не бросает.
        """
        text = (description or "").casefold()
        if not text.strip():
            return self.default_category

        for name, pattern in self._patterns:
            if pattern.search(text):
                return name

        return self.default_category
