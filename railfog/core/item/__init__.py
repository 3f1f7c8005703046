"""아이템 시스템 Core - 순수 Python"""

from .models import InventorySlot, ItemKind, ItemRequirement, ItemSpec, Recipe, RecipeOutput
from .registry import ItemRegistry, RecipeBook
from .inventory import Inventory, add_item, remove_item, consume_combined

__all__ = [
    "InventorySlot",
    "ItemKind",
    "ItemRequirement",
    "ItemSpec",
    "Recipe",
    "RecipeOutput",
    "ItemRegistry",
    "RecipeBook",
    "Inventory",
    "add_item",
    "remove_item",
    "consume_combined",
]
