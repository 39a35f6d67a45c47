from pathlib import Path

import duckdb
import pytest

from gtnh_machines.data_source import (
    InMemoryRepository,
    LocalDataSource,
    StaticDataSource,
    create_data_source,
)
from gtnh_machines.models import RecipeIoType, RecipeModel


def _write(con: duckdb.DuckDBPyConnection, path: Path, select: str) -> None:
    con.execute(f"COPY ({select}) TO '{path.as_posix()}' (FORMAT PARQUET)")


@pytest.fixture
def dataset(tmp_path: Path) -> Path:
    con = duckdb.connect(database=":memory:")
    _write(
        con,
        tmp_path / "recipes.parquet",
        """
        SELECT * FROM (VALUES
            ('r1', 'Assembler', 30, 1, 1, 100, 0),
            ('r2', 'Electric Blast Furnace', 120, 2, 1, 400, 1800)
        ) t(rid, recipe_type, voltage, voltage_tier, amperage, duration_ticks, special_value)
        """,
    )
    _write(
        con,
        tmp_path / "recipe_items.parquet",
        """
        SELECT * FROM (VALUES
            ('r1', 2, 'item_output', 'i:gregtech:plate', 'Iron Plate', 0, 1.0, CAST(NULL AS DOUBLE)),
            ('r1', 0, 'item_input', 'i:minecraft:iron_ingot', 'Iron Ingot', 0, 2.0, CAST(NULL AS DOUBLE)),
            ('r1', 1, 'fluid_input', 'f:water', 'Water', 0, 1000.0, CAST(NULL AS DOUBLE)),
            ('r2', 0, 'item_output', 'i:gregtech:ingot', NULL, 1, 1.0, 0.5)
        ) t(rid, position, kind, goods_id, goods_name, slot, amount, probability)
        """,
    )
    _write(
        con,
        tmp_path / "recipe_metadata.parquet",
        """
        SELECT * FROM (VALUES
            ('r2', 'compression_tier', 1.0)
        ) t(rid, key, value)
        """,
    )
    con.close()
    return tmp_path


def test_recipe_by_rid_reads_all_tables(dataset: Path) -> None:
    repository = LocalDataSource(dataset).open_repository()
    try:
        recipe = repository.recipe_by_rid("r1")
    finally:
        repository.close()

    assert recipe is not None
    assert recipe.recipe_type == "Assembler"
    assert (recipe.voltage, recipe.voltage_tier, recipe.duration_ticks) == (30, 1, 100)
    assert [item.goods.id for item in recipe.items] == [
        "i:minecraft:iron_ingot",
        "f:water",
        "i:gregtech:plate",
    ]
    assert recipe.items[1].type == RecipeIoType.fluid_input
    assert recipe.items[1].goods.is_fluid
    assert recipe.items[0].probability == 1.0
    assert recipe.metadata == {}


def test_recipe_metadata_and_probability(dataset: Path) -> None:
    repository = LocalDataSource(dataset).open_repository()
    try:
        recipe = repository.recipe_by_rid("r2")
        missing = repository.recipe_by_rid("nope")
    finally:
        repository.close()

    assert recipe.metadata_by_key("compression_tier") == 1.0
    assert recipe.special_value == 1800
    assert recipe.items[0].probability == pytest.approx(0.5)
    assert recipe.items[0].goods.name == "i:gregtech:ingot"
    assert missing is None


def test_goods_lookup_falls_back_to_recipe_items(dataset: Path) -> None:
    repository = LocalDataSource(dataset).open_repository()
    try:
        water = repository.goods_by_id("f:water")
        unknown = repository.goods_by_id("i:unknown")
        ids = repository.list_recipe_ids(10)
    finally:
        repository.close()

    assert water.name == "Water"
    assert water.is_fluid
    assert unknown is None
    assert ids == ["r1", "r2"]


def test_goods_table_is_preferred(dataset: Path) -> None:
    con = duckdb.connect(database=":memory:")
    _write(
        con,
        dataset / "goods.parquet",
        "SELECT * FROM (VALUES ('f:water', 'Distilled Water', true)) t(goods_id, name, is_fluid)",
    )
    con.close()

    repository = LocalDataSource(dataset).open_repository()
    try:
        assert repository.goods_by_id("f:water").name == "Distilled Water"
        assert repository.goods_by_id("i:gregtech:plate").name == "Iron Plate"
    finally:
        repository.close()


def test_context_resolves_goods_through_repository(dataset: Path) -> None:
    repository = LocalDataSource(dataset).open_repository()
    try:
        context = RecipeModel(recipe=None, voltage_tier=1, choices={}, repository=repository)
        assert context.goods_by_id("i:minecraft:iron_ingot").name == "Iron Ingot"
        assert context.goods_by_id("f:miscutils:plasma.fermium").is_fluid
    finally:
        repository.close()


def test_missing_dataset_file(tmp_path: Path) -> None:
    repository = LocalDataSource(tmp_path).open_repository()
    try:
        with pytest.raises(FileNotFoundError, match="Missing dataset file"):
            repository.recipe_by_rid("r1")
    finally:
        repository.close()


def test_static_source_shares_repository(basic_recipe) -> None:
    source = StaticDataSource([basic_recipe])
    repository = source.open_repository()
    assert repository is source.open_repository()
    assert repository.recipe_by_rid("r1") is basic_recipe
    assert repository.goods_by_id("f:water").name == "Water"
    assert repository.list_recipe_ids(5) == ["r1"]


def test_create_data_source(tmp_path: Path) -> None:
    assert isinstance(create_data_source("local", tmp_path), LocalDataSource)
    assert isinstance(create_data_source("memory", tmp_path).open_repository(), InMemoryRepository)
    with pytest.raises(ValueError, match="Unsupported data source"):
        create_data_source("postgres", tmp_path)
