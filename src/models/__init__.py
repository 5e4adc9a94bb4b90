from src.models.bindings import (
    DEFAULT_ACTIONS,
    MODIFIER_ORDER,
    ActionCatalog,
    ActionSpec,
    BindingMode,
    BindingRecord,
    BindingSet,
    HotkeyAction,
    Modifier,
)
from src.models.catalog import Catalog, CatalogItem, Grace, Lookup
from src.models.config import AppConfig
from src.models.profiles import (
    DEFAULT_ASH,
    DEFAULT_INFUSION,
    EMPTY_PROFILE_NAME,
    GraceSelection,
    ItemCategory,
    ItemSelection,
    clamp_level,
    is_reserved_name,
    max_level_for_category,
)

__all__ = [
    "DEFAULT_ACTIONS",
    "MODIFIER_ORDER",
    "ActionCatalog",
    "ActionSpec",
    "AppConfig",
    "BindingMode",
    "BindingRecord",
    "BindingSet",
    "Catalog",
    "CatalogItem",
    "DEFAULT_ASH",
    "DEFAULT_INFUSION",
    "EMPTY_PROFILE_NAME",
    "Grace",
    "GraceSelection",
    "HotkeyAction",
    "ItemCategory",
    "ItemSelection",
    "Lookup",
    "Modifier",
    "clamp_level",
    "is_reserved_name",
    "max_level_for_category",
]
