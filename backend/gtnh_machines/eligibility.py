from __future__ import annotations

from typing import Callable

from .models import Recipe
from .overclock import fusion_tier

RecipeExcluder = Callable[[Recipe], bool]


def _metadata(recipe: Recipe, key: str) -> float:
    value = recipe.metadata_by_key(key)
    return 0 if value is None else value


def make_compressor_excluder(tier: int) -> RecipeExcluder:
    """Exclude recipes whose compression tier exceeds what the machine handles."""

    def excludes(recipe: Recipe) -> bool:
        return tier < _metadata(recipe, "compression_tier")

    return excludes


def make_space_assembler_excluder(tier: int) -> RecipeExcluder:
    def excludes(recipe: Recipe) -> bool:
        return _metadata(recipe, "space_elevator_module_tier") > tier

    return excludes


def make_fusion_excluder(tier: int) -> RecipeExcluder:
    def excludes(recipe: Recipe) -> bool:
        return tier < fusion_tier(recipe)

    return excludes
