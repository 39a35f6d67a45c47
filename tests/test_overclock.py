import math

import pytest

from gtnh_machines.coefficients import MAX_OVERCLOCK, resolve
from gtnh_machines.models import RecipeIoType, RecipeModel
from gtnh_machines.overclock import (
    default_overclock,
    ebf_base_coil_tier,
    ebf_perfect_overclock,
    ebf_power,
    fusion_tier,
    laser_overclock,
    make_fusion_overclock,
    make_gated_overclock,
    make_space_assembler_overclock,
    make_tier_delta_overclock,
    no_overclock,
)
from gtnh_machines.tiers import (
    TIER_EV,
    TIER_HV,
    TIER_IV,
    TIER_LUV,
    TIER_LV,
    TIER_MV,
    TIER_UHV,
    TIER_UV,
    fusion_tier_by_startup_cost,
)


def _inputs(make_item, count: int):
    return [make_item(RecipeIoType.item_input, f"i:part{n}", 1) for n in range(count)]


def test_no_overclock_is_identity(make_context) -> None:
    result = no_overclock(make_context(None, voltage_tier=TIER_UV), 10)
    assert (result.speed_multiplier, result.power_multiplier, result.perfect_overclocks) == (1, 1, 0)


def test_default_overclock_perfect_steps_first(make_recipe, make_context) -> None:
    context = make_context(make_recipe(voltage_tier=TIER_LV), voltage_tier=TIER_EV)
    result = default_overclock(context, 3, perfect_overclocks=1)
    assert result.speed_multiplier == 16
    assert result.power_multiplier == 4
    assert result.perfect_overclocks == 1
    assert result.name == "Perfect OC x1, OC x2"


def test_default_overclock_capped_by_headroom(make_recipe, make_context) -> None:
    context = make_context(make_recipe(voltage_tier=TIER_LV), voltage_tier=TIER_MV)
    result = default_overclock(context, 5, perfect_overclocks=MAX_OVERCLOCK)
    assert result.speed_multiplier == 4
    assert result.power_multiplier == 1
    assert result.perfect_overclocks == 1


def test_laser_overclock_without_headroom_is_identity(make_recipe, make_item, make_context) -> None:
    # 4 slices at 128 EU/t == 16A of LV: nothing left to overclock with.
    recipe = make_recipe(items=_inputs(make_item, 4), voltage=128, voltage_tier=TIER_LV)
    context = make_context(recipe, voltage_tier=TIER_LV, inputAmperage=16)
    result = laser_overclock(context, context.overclock_tiers)
    assert result.speed_multiplier == 1
    assert result.power_multiplier == 1
    assert result.name == ""


def test_laser_overclock_regular_then_laser(make_recipe, make_item, make_context) -> None:
    recipe = make_recipe(items=_inputs(make_item, 1), voltage=32, voltage_tier=TIER_LV)
    context = make_context(recipe, voltage_tier=TIER_IV, inputAmperage=16)
    result = laser_overclock(context, context.overclock_tiers)
    assert result.speed_multiplier == 32
    assert result.power_multiplier == pytest.approx(16 * 4.3 / 2)
    assert result.perfect_overclocks == 0
    assert result.name == "OC x4, Laser OC x1"


def test_laser_overclock_stops_at_tier_budget(make_recipe, make_item, make_context) -> None:
    recipe = make_recipe(items=_inputs(make_item, 1), voltage=32, voltage_tier=TIER_IV)
    context = make_context(recipe, voltage_tier=TIER_IV, inputAmperage=16)
    result = laser_overclock(context, 0)
    # Budget 0 + log4(16) = 2: the third laser step crosses it and ends the loop.
    assert result.speed_multiplier == 8
    assert result.power_multiplier == pytest.approx(4.3 / 2 * 4.6 / 2 * 4.9 / 2)
    assert result.name == "Laser OC x3"


def test_tier_delta_never_negative(make_recipe, make_context) -> None:
    calculate = make_tier_delta_overclock("nfr_coil_tier", "coils")
    recipe = make_recipe(voltage_tier=TIER_EV, metadata={"nfr_coil_tier": 3})
    result = calculate(make_context(recipe, voltage_tier=TIER_UV, coils=0), 4)
    assert result.perfect_overclocks == 0
    assert result.speed_multiplier == 1
    assert result.power_multiplier == 1
    assert result.name == "Perfect OC x0 (capped)"


def test_tier_delta_capped_by_voltage(make_recipe, make_context) -> None:
    calculate = make_tier_delta_overclock("nfr_coil_tier", "coils")
    recipe = make_recipe(voltage_tier=TIER_EV, metadata={"nfr_coil_tier": 1})
    result = calculate(make_context(recipe, voltage_tier=TIER_IV, coils=3), 1)
    assert result.perfect_overclocks == 1
    assert result.speed_multiplier == 4
    assert result.name == "Perfect OC x1"

    below = calculate(make_context(recipe, voltage_tier=TIER_MV, coils=3), 0)
    assert below.perfect_overclocks == 0


def test_fusion_overclock_one_tier_gap(make_recipe, make_context) -> None:
    recipe = make_recipe(voltage_tier=TIER_LUV, metadata={"fusion_threshold": 100_000_000})
    assert fusion_tier(recipe) == 1
    result = make_fusion_overclock(2, 2)(make_context(recipe, voltage_tier=TIER_LUV), 0)
    assert result.perfect_overclocks == 1
    assert result.speed_multiplier == 2
    assert result.power_multiplier == 1
    assert result.name == "2/2 OC x1"


def test_fusion_overclock_never_negative(make_recipe, make_context) -> None:
    recipe = make_recipe(voltage_tier=TIER_UHV)
    result = make_fusion_overclock(1, 2)(make_context(recipe, voltage_tier=TIER_LUV), 0)
    assert result.perfect_overclocks == 0
    assert result.speed_multiplier == 1


def test_fusion_tier_takes_strongest_signal(make_recipe) -> None:
    assert fusion_tier(make_recipe(voltage_tier=TIER_LUV, metadata={"fog_plasma_tier": 3})) == 3
    assert fusion_tier(make_recipe(voltage_tier=TIER_LUV, metadata={"fusion_threshold": 400_000_000})) == 3
    assert fusion_tier(make_recipe(voltage_tier=TIER_UHV, metadata={"fusion_threshold": 1})) == 4


@pytest.mark.parametrize(
    "cost, tier",
    [(0, 1), (160_000_000, 1), (160_000_001, 2), (640_000_000, 3), (5_120_000_000, 4), (6_000_000_000, 5)],
)
def test_fusion_tier_by_startup_cost(cost, tier) -> None:
    assert fusion_tier_by_startup_cost(cost) == tier


def test_space_assembler_requires_module_tier(make_recipe, make_context) -> None:
    calculate = make_space_assembler_overclock(TIER_UHV, 1)
    too_advanced = make_recipe(voltage_tier=TIER_UV, metadata={"space_elevator_module_tier": 2})
    result = calculate(make_context(too_advanced, voltage_tier=TIER_UHV + 1), 0)
    assert result.speed_multiplier == 0
    assert "higher Space Assembler tier" in result.name

    ok = make_recipe(voltage_tier=TIER_UV, metadata={"space_elevator_module_tier": 1})
    result = calculate(make_context(ok, voltage_tier=TIER_UHV + 1), 0)
    assert result.speed_multiplier == 2
    assert result.power_multiplier == 2
    assert result.name == "OC x1 (capped)"


def test_fusion_tier_without_recipe() -> None:
    assert fusion_tier(None) == 1


def test_gated_overclock(make_recipe, make_context) -> None:
    perfect = lambda model, choices: MAX_OVERCLOCK if choices["cooling"] >= 2 else 0  # noqa: E731
    calculate = make_gated_overclock("cooling", perfect)
    recipe = make_recipe(voltage_tier=TIER_LV)

    off = calculate(make_context(recipe, voltage_tier=TIER_HV, cooling=0), 2)
    assert (off.speed_multiplier, off.power_multiplier) == (1, 1)

    regular = calculate(make_context(recipe, voltage_tier=TIER_HV, cooling=1), 2)
    assert (regular.speed_multiplier, regular.power_multiplier) == (4, 4)

    perfect_result = calculate(make_context(recipe, voltage_tier=TIER_HV, cooling=2), 2)
    assert (perfect_result.speed_multiplier, perfect_result.power_multiplier) == (16, 1)


@pytest.mark.parametrize("temperature, tier", [(0, 0), (1800, 0), (2701, 1), (4500, 2), (99_999, 13)])
def test_ebf_base_coil_tier(make_recipe, temperature, tier) -> None:
    assert ebf_base_coil_tier(make_recipe(special_value=temperature)) == tier


def test_ebf_matching_coils(make_recipe, make_context) -> None:
    context = make_context(make_recipe(special_value=4500), coilTier=2)
    assert resolve(ebf_perfect_overclock, context) == 0
    assert resolve(ebf_power, context) == 1


def test_ebf_better_and_worse_coils(make_recipe, make_context) -> None:
    recipe = make_recipe(special_value=4500)
    better = make_context(recipe, coilTier=5)
    assert resolve(ebf_perfect_overclock, better) == 1
    assert resolve(ebf_power, better) == pytest.approx(0.95**3)

    worse = make_context(recipe, coilTier=0)
    assert resolve(ebf_perfect_overclock, worse) == 0
    assert resolve(ebf_power, worse) == pytest.approx(0.95**-2)
    assert resolve(ebf_power, worse) > 1


def test_algorithms_are_repeatable(make_recipe, make_item, make_context) -> None:
    recipe = make_recipe(items=_inputs(make_item, 2), voltage=32, voltage_tier=TIER_LV)
    context = RecipeModel(recipe=recipe, voltage_tier=TIER_IV, choices={"inputAmperage": 64})
    assert laser_overclock(context, 4) == laser_overclock(context, 4)
    assert not math.isnan(laser_overclock(context, 4).power_multiplier)
