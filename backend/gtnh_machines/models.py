from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .tiers import TIER_LV

logger = logging.getLogger("gtnh_machines.models")


class RecipeIoType(str, Enum):
    item_input = "item_input"
    item_output = "item_output"
    fluid_input = "fluid_input"
    fluid_output = "fluid_output"

    @property
    def is_output(self) -> bool:
        return self in (RecipeIoType.item_output, RecipeIoType.fluid_output)

    @property
    def is_fluid(self) -> bool:
        return self in (RecipeIoType.fluid_input, RecipeIoType.fluid_output)


@dataclass(frozen=True)
class Goods:
    id: str
    name: str
    is_fluid: bool = False

    @classmethod
    def placeholder(cls, goods_id: str) -> "Goods":
        return cls(id=goods_id, name=goods_id, is_fluid=goods_id.startswith("f:"))


@dataclass(frozen=True)
class RecipeItem:
    type: RecipeIoType
    goods: Goods
    slot: int
    amount: float
    probability: float = 1.0


@dataclass(frozen=True)
class Recipe:
    rid: str
    recipe_type: str
    voltage: int = 0
    voltage_tier: int = TIER_LV
    amperage: int = 1
    duration_ticks: int = 1
    special_value: int = 0
    items: Tuple[RecipeItem, ...] = ()
    metadata: Dict[str, float] = field(default_factory=dict)

    def metadata_by_key(self, key: str) -> Optional[float]:
        return self.metadata.get(key)

    def count(self, io_type: RecipeIoType) -> int:
        return sum(1 for item in self.items if item.type == io_type)


class GoodsRepository:
    def goods_by_id(self, goods_id: str) -> Optional[Goods]:
        raise NotImplementedError


@dataclass
class RecipeModel:
    """Per-calculation context handed to coefficients and machine hooks.

    ``choices`` maps choice names to numbers; discrete choices hold the
    selected option index.
    """

    recipe: Optional[Recipe]
    voltage_tier: int
    choices: Dict[str, float] = field(default_factory=dict)
    repository: Optional[GoodsRepository] = None

    def item_input_count(self) -> int:
        if self.recipe is None:
            return 0
        return self.recipe.count(RecipeIoType.item_input)

    def output_count(self) -> int:
        if self.recipe is None:
            return 0
        return sum(1 for item in self.recipe.items if item.type.is_output)

    @property
    def overclock_tiers(self) -> int:
        recipe_tier = self.recipe.voltage_tier if self.recipe else TIER_LV
        return max(0, self.voltage_tier - recipe_tier)

    def goods_by_id(self, goods_id: str) -> Goods:
        goods = self.repository.goods_by_id(goods_id) if self.repository else None
        if goods is None:
            logger.debug("goods %s not in repository; using placeholder", goods_id)
            return Goods.placeholder(goods_id)
        return goods


@dataclass(frozen=True)
class OverclockResult:
    speed_multiplier: float = 1.0
    power_multiplier: float = 1.0
    perfect_overclocks: float = 0
    name: Optional[str] = None
