import pytest

from gtnh_machines.models import Goods, Recipe, RecipeIoType, RecipeItem, RecipeModel
from gtnh_machines.tiers import TIER_LV


def _item(io_type: RecipeIoType, goods_id: str, amount: float, name: str | None = None, slot: int = 0):
    goods = Goods(id=goods_id, name=name or goods_id, is_fluid=io_type.is_fluid)
    return RecipeItem(type=io_type, goods=goods, slot=slot, amount=amount)


@pytest.fixture
def make_item():
    return _item


@pytest.fixture
def make_recipe():
    def build(
        items=(),
        recipe_type: str = "Assembler",
        voltage: int = 30,
        voltage_tier: int = TIER_LV,
        metadata: dict | None = None,
        **kwargs,
    ) -> Recipe:
        return Recipe(
            rid=kwargs.pop("rid", "r1"),
            recipe_type=recipe_type,
            voltage=voltage,
            voltage_tier=voltage_tier,
            items=tuple(items),
            metadata=metadata or {},
            **kwargs,
        )

    return build


@pytest.fixture
def make_context():
    def build(recipe: Recipe | None, voltage_tier: int = TIER_LV, **choices: float) -> RecipeModel:
        return RecipeModel(recipe=recipe, voltage_tier=voltage_tier, choices=dict(choices))

    return build


@pytest.fixture
def basic_recipe(make_recipe):
    return make_recipe(
        items=[
            _item(RecipeIoType.item_input, "i:minecraft:iron_ingot", 2, "Iron Ingot"),
            _item(RecipeIoType.fluid_input, "f:water", 1000, "Water"),
            _item(RecipeIoType.item_output, "i:gregtech:plate", 1, "Iron Plate"),
        ]
    )
