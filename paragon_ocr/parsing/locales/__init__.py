from .config_loader import (
    CategoryRule,
    ConfigLoader,
    LocaleConfig,
    MetadataConfig,
    SemanticConfig,
)

__all__ = ["CategoryRule", "ConfigLoader", "LocaleConfig", "MetadataConfig", "SemanticConfig"]
