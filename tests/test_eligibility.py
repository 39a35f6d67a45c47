import pytest

from gtnh_machines.eligibility import make_compressor_excluder, make_fusion_excluder, make_space_assembler_excluder
from gtnh_machines.machine import SINGLE_BLOCK_MACHINE, Machine
from gtnh_machines.machines import MACHINES
from gtnh_machines.tiers import TIER_LUV, TIER_UV


@pytest.mark.parametrize("compression_tier, eligible", [(None, True), (0, True), (1, True), (2, False)])
def test_compressor_excluder(make_recipe, compression_tier, eligible) -> None:
    metadata = {} if compression_tier is None else {"compression_tier": compression_tier}
    assert make_compressor_excluder(1)(make_recipe(metadata=metadata)) is not eligible


def test_single_block_refuses_compressed_recipes(make_recipe) -> None:
    assert SINGLE_BLOCK_MACHINE.is_eligible(make_recipe())
    assert not SINGLE_BLOCK_MACHINE.is_eligible(make_recipe(metadata={"compression_tier": 1}))


def test_machine_without_predicate_accepts_everything(make_recipe) -> None:
    assert Machine().is_eligible(make_recipe(metadata={"compression_tier": 5}))


def test_space_assembler_excluder(make_recipe) -> None:
    excludes = make_space_assembler_excluder(2)
    assert not excludes(make_recipe())
    assert not excludes(make_recipe(metadata={"space_elevator_module_tier": 2}))
    assert excludes(make_recipe(metadata={"space_elevator_module_tier": 3}))


def test_fusion_excluder(make_recipe) -> None:
    mark_two = make_fusion_excluder(2)
    assert not mark_two(make_recipe(voltage_tier=TIER_LUV))
    assert mark_two(make_recipe(voltage_tier=TIER_UV))
    assert mark_two(make_recipe(voltage_tier=TIER_LUV, metadata={"fog_plasma_tier": 3}))


def test_registered_compressors_by_tier(make_recipe) -> None:
    recipe = make_recipe(metadata={"compression_tier": 1})
    assert not MACHINES["Large Electric Compressor"].is_eligible(recipe)
    assert MACHINES["Hot Isostatic Pressurization Unit"].is_eligible(recipe)
    assert MACHINES["Pseudostable Black Hole Containment Field"].is_eligible(
        make_recipe(metadata={"compression_tier": 2})
    )
    assert not MACHINES["Steam Compressor"].is_eligible(recipe)
