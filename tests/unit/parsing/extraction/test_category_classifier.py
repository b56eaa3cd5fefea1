import pytest
from paragon_ocr.parsing.extraction.category_classifier import CategoryClassifier
from paragon_ocr.parsing.locales.config_loader import CategoryRule, LocaleConfig


@pytest.fixture
def classifier():
    return CategoryClassifier()


def test_dairy_keyword(classifier):
    assert classifier.classify("Mleko 3,2% 1L") == "Dairy"


def test_case_insensitive(classifier):
    assert classifier.classify("CHLEB PSZENNY") == "Bakery"
    assert classifier.classify("Milk") == "Dairy"


def test_unknown_item_is_other(classifier):
    assert classifier.classify("XYZ123") == "Other"


def test_empty_description_is_other(classifier):
    assert classifier.classify("") == "Other"
    assert classifier.classify("   ") == "Other"
    assert classifier.classify(None) == "Other"


def test_priority_resolves_ties():
    # "Chocolate milk" подходит и под Dairy, и под Sweets: побеждает первая в списке
    rules = [
        CategoryRule("Sweets", ("chocolate",)),
        CategoryRule("Dairy", ("milk",)),
    ]
    assert CategoryClassifier(rules).classify("Chocolate milk") == "Sweets"

    reversed_rules = list(reversed(rules))
    assert CategoryClassifier(reversed_rules).classify("Chocolate milk") == "Dairy"


def test_default_priority_dairy_before_sweets(classifier):
    assert classifier.priority.index("Dairy") < classifier.priority.index("Sweets")
    assert classifier.classify("Czekolada mleczna") == "Sweets"
    assert classifier.classify("Mleko czekoladowe") == "Dairy"


def test_custom_default_category():
    assert CategoryClassifier(default_category="Misc").classify("XYZ123") == "Misc"


def test_from_locale_keeps_yaml_order():
    locale = LocaleConfig.load("pl_PL")
    classifier = CategoryClassifier.from_locale(locale)
    assert classifier.priority == [rule.name for rule in locale.categories]
    assert classifier.priority[0] == "Household"


def test_from_locale_none_uses_defaults():
    assert CategoryClassifier.from_locale(None).priority == CategoryClassifier().priority


@pytest.mark.parametrize("description, expected", [
    # Ключевое слово совпадает только с начала слова
    ("Shampoo", "Household"),
    ("Chocolate", "Sweets"),
    ("Deser czekoladowy", "Sweets"),
    ("Serwetki papierowe", "Household"),
    ("Serek wiejski", "Dairy"),
    ("Ser gouda", "Dairy"),
    ("Hamburger wołowy", "Meat"),
    ("Coca-Cola 0,5L", "Beverages"),
])
def test_keywords_match_word_start(classifier, description, expected):
    assert classifier.classify(description) == expected


def test_locale_categories_match_defaults():
    locale = LocaleConfig.load("pl_PL")
    classifier = CategoryClassifier.from_locale(locale)
    for name in ["Shampoo", "Chocolate", "Deser czekoladowy", "Serwetki papierowe"]:
        assert classifier.classify(name) == CategoryClassifier().classify(name)
