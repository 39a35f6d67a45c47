"""Overclock algorithms.

Every algorithm takes ``(context, overclock_tiers, default)`` and returns an
:class:`OverclockResult`. ``default`` is the caller's default algorithm;
algorithms that fall back to regular overclocking use it, and treat ``None``
as :func:`default_overclock`. ``power_multiplier`` scales the energy spent per
operation: a regular overclock step doubles speed and power, a perfect step
quadruples speed and leaves power alone.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional

from .coefficients import Coefficient, resolve
from .models import OverclockResult, Recipe, RecipeModel
from .tiers import TIER_LUV, TIER_LV, fusion_tier_by_startup_cost, voltage_of

DefaultOverclock = Callable[[RecipeModel, int, float], OverclockResult]
OverclockAlgorithm = Callable[[RecipeModel, int, Optional[DefaultOverclock]], OverclockResult]


def no_overclock(
    context: RecipeModel, overclock_tiers: int, default: Optional[DefaultOverclock] = None
) -> OverclockResult:
    return OverclockResult(speed_multiplier=1, power_multiplier=1, perfect_overclocks=0)


def default_overclock(
    context: RecipeModel, overclock_tiers: int, perfect_overclocks: float = 0
) -> OverclockResult:
    tiers = max(0, min(overclock_tiers, context.overclock_tiers))
    perfect = int(min(tiers, max(0, perfect_overclocks)))
    regular = tiers - perfect
    parts: List[str] = []
    if perfect > 0:
        parts.append(f"Perfect OC x{perfect}")
    if regular > 0:
        parts.append(f"OC x{regular}")
    return OverclockResult(
        speed_multiplier=4**perfect * 2**regular,
        power_multiplier=2**regular,
        perfect_overclocks=perfect,
        name=", ".join(parts) or None,
    )


def make_tier_delta_overclock(metadata_key: str, choice_name: str, base: float = 4) -> OverclockAlgorithm:
    """Perfect overclocks bounded by how far the building tier exceeds the recipe tier.

    The building tier is the 0-based ``choice_name`` index plus one; the recipe
    tier comes from ``metadata_key`` (default 1). The count is further capped by
    the voltage headroom over the recipe's native tier.
    """

    def calculate(
        context: RecipeModel, overclock_tiers: int, default: Optional[DefaultOverclock] = None
    ) -> OverclockResult:
        recipe = context.recipe
        building_tier = context.choices.get(choice_name, 0) + 1
        recipe_tier = _metadata(recipe, metadata_key, 1)
        max_perfect = max(0, building_tier - recipe_tier)
        native_tier = recipe.voltage_tier if recipe else 0
        perfect = max(0, min(max_perfect, context.voltage_tier - native_tier))
        capped = " (capped)" if perfect == max_perfect else ""
        return OverclockResult(
            speed_multiplier=base**perfect,
            power_multiplier=1,
            perfect_overclocks=perfect,
            name=f"Perfect OC x{_fmt(perfect)}{capped}",
        )

    return calculate


def laser_overclock(
    context: RecipeModel, overclock_tiers: int, default: Optional[DefaultOverclock] = None
) -> OverclockResult:
    recipe = context.recipe
    amperage = context.choices["inputAmperage"]
    available_eut = voltage_of(context.voltage_tier) * amperage
    current_eut = ((recipe.voltage if recipe else 0) or 32) * context.item_input_count()

    speed = 1.0
    power = 1.0

    max_regular = context.voltage_tier - ((recipe.voltage_tier if recipe else 0) or TIER_LV)
    regular = 0
    while current_eut * 4 < available_eut and regular < max_regular:
        current_eut *= 4
        speed *= 2
        power *= 2
        regular += 1

    laser = 0
    while True:
        multiplier = 4.0 + 0.3 * (laser + 1)
        potential_eut = current_eut * multiplier
        if potential_eut >= available_eut:
            break
        current_eut = potential_eut
        speed *= 2
        power *= multiplier / 2
        laser += 1
        if laser + regular > overclock_tiers + math.log(amperage) / math.log(4):
            break

    parts: List[str] = []
    if regular > 0:
        parts.append(f"OC x{regular}")
    if laser > 0:
        parts.append(f"Laser OC x{laser}")
    return OverclockResult(
        speed_multiplier=speed,
        power_multiplier=power,
        perfect_overclocks=0,
        name=", ".join(parts),
    )


def fusion_tier(recipe: Optional[Recipe]) -> int:
    if recipe is None:
        return 1
    plasma_tier = _metadata(recipe, "fog_plasma_tier", 0)
    cost_tier = fusion_tier_by_startup_cost(_metadata(recipe, "fusion_threshold", 0))
    voltage_tier = recipe.voltage_tier - TIER_LUV + 1
    return int(max(plasma_tier, cost_tier, voltage_tier))


def make_fusion_overclock(machine_fusion_tier: int, multiplier: float) -> OverclockAlgorithm:
    def calculate(
        context: RecipeModel, overclock_tiers: int, default: Optional[DefaultOverclock] = None
    ) -> OverclockResult:
        if context.recipe is None:
            return no_overclock(context, overclock_tiers)
        perfect = max(0, machine_fusion_tier - fusion_tier(context.recipe))
        return OverclockResult(
            speed_multiplier=multiplier**perfect,
            power_multiplier=1,
            perfect_overclocks=perfect,
            name=f"{_fmt(multiplier)}/{_fmt(multiplier)} OC x{perfect}",
        )

    return calculate


def make_space_assembler_overclock(max_voltage_tier: int, module_tier: int) -> OverclockAlgorithm:
    def calculate(
        context: RecipeModel, overclock_tiers: int, default: Optional[DefaultOverclock] = None
    ) -> OverclockResult:
        recipe = context.recipe
        recipe_module_tier = _metadata(recipe, "space_elevator_module_tier", 0)
        max_overclocks = max_voltage_tier - (recipe.voltage_tier if recipe else TIER_LV)
        if max_overclocks < 0 or module_tier < recipe_module_tier:
            return OverclockResult(
                speed_multiplier=0,
                power_multiplier=1,
                perfect_overclocks=0,
                name="Can't perform, requires higher Space Assembler tier.",
            )
        # The module always runs at its own voltage, so the headroom is the cap.
        overclocks = max_overclocks
        return OverclockResult(
            speed_multiplier=2**overclocks,
            power_multiplier=2**overclocks,
            perfect_overclocks=0,
            name=f"OC x{overclocks} (capped)",
        )

    return calculate


def make_gated_overclock(choice_name: str, perfect_overclock: Coefficient) -> OverclockAlgorithm:
    """No overclocking while ``choice_name`` sits at its lowest option."""

    def calculate(
        context: RecipeModel, overclock_tiers: int, default: Optional[DefaultOverclock] = None
    ) -> OverclockResult:
        if context.choices.get(choice_name, 0) == 0:
            return no_overclock(context, overclock_tiers)
        fallback = default or default_overclock
        return fallback(context, overclock_tiers, resolve(perfect_overclock, context))

    return calculate


def ebf_base_coil_tier(recipe: Optional[Recipe]) -> int:
    temperature = recipe.special_value if recipe else 0
    return max(0, min(13, math.floor((temperature - 1801) / 900)))


def ebf_perfect_overclock(context: RecipeModel, choices: Dict[str, float]) -> float:
    return math.floor((choices["coilTier"] - ebf_base_coil_tier(context.recipe)) / 2)


def ebf_power(context: RecipeModel, choices: Dict[str, float]) -> float:
    return 0.95 ** (choices["coilTier"] - ebf_base_coil_tier(context.recipe))


def _metadata(recipe: Optional[Recipe], key: str, default: float) -> float:
    if recipe is None:
        return default
    value = recipe.metadata_by_key(key)
    return default if value is None else value


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
