from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import duckdb

from .models import Goods, GoodsRepository, Recipe, RecipeIoType, RecipeItem

logger = logging.getLogger("gtnh_machines.data_source")


class RecipeRepository(GoodsRepository):
    def recipe_by_rid(self, rid: str) -> Optional[Recipe]:
        raise NotImplementedError

    def list_recipe_ids(self, limit: int) -> List[str]:
        raise NotImplementedError

    def close(self) -> None:
        pass


@dataclass
class InMemoryRepository(RecipeRepository):
    recipes: Dict[str, Recipe] = field(default_factory=dict)
    goods: Dict[str, Goods] = field(default_factory=dict)

    def add_recipe(self, recipe: Recipe) -> None:
        self.recipes[recipe.rid] = recipe
        for item in recipe.items:
            self.goods.setdefault(item.goods.id, item.goods)

    def recipe_by_rid(self, rid: str) -> Optional[Recipe]:
        return self.recipes.get(rid)

    def goods_by_id(self, goods_id: str) -> Optional[Goods]:
        return self.goods.get(goods_id)

    def list_recipe_ids(self, limit: int) -> List[str]:
        return list(self.recipes)[:limit]


def _require_file(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(f"Missing dataset file: {path}")
    return path


@dataclass
class DuckDBRepository(RecipeRepository):
    data_dir: Path
    con: duckdb.DuckDBPyConnection
    _has_goods: Optional[bool] = None

    def close(self) -> None:
        self.con.close()

    def _path(self, name: str) -> str:
        return str(_require_file(self.data_dir / name))

    def recipe_by_rid(self, rid: str) -> Optional[Recipe]:
        row = self.con.execute(
            """
            select rid, recipe_type, voltage, voltage_tier, amperage, duration_ticks, special_value
            from read_parquet(?)
            where rid = ?
            """,
            [self._path("recipes.parquet"), rid],
        ).fetchone()
        if not row:
            return None
        items = self.con.execute(
            """
            select kind, goods_id, goods_name, slot, amount, probability
            from read_parquet(?)
            where rid = ?
            order by position
            """,
            [self._path("recipe_items.parquet"), rid],
        ).fetchall()
        metadata = self.con.execute(
            """
            select key, value
            from read_parquet(?)
            where rid = ?
            """,
            [self._path("recipe_metadata.parquet"), rid],
        ).fetchall()
        return Recipe(
            rid=row[0],
            recipe_type=row[1],
            voltage=int(row[2] or 0),
            voltage_tier=int(row[3] or 0),
            amperage=int(row[4] or 1),
            duration_ticks=int(row[5] or 1),
            special_value=int(row[6] or 0),
            items=tuple(
                RecipeItem(
                    type=RecipeIoType(r[0]),
                    goods=Goods(id=r[1], name=r[2] or r[1], is_fluid=RecipeIoType(r[0]).is_fluid),
                    slot=int(r[3] or 0),
                    amount=float(r[4]),
                    probability=float(r[5]) if r[5] is not None else 1.0,
                )
                for r in items
            ),
            metadata={r[0]: float(r[1]) for r in metadata if r[1] is not None},
        )

    def goods_by_id(self, goods_id: str) -> Optional[Goods]:
        goods_path = self.data_dir / "goods.parquet"
        if self._has_goods is None:
            self._has_goods = goods_path.exists()
        if self._has_goods:
            row = self.con.execute(
                "select goods_id, name, is_fluid from read_parquet(?) where goods_id = ?",
                [str(goods_path), goods_id],
            ).fetchone()
            if row:
                return Goods(id=row[0], name=row[1] or row[0], is_fluid=bool(row[2]))
        row = self.con.execute(
            """
            select goods_id, goods_name, kind
            from read_parquet(?)
            where goods_id = ?
            limit 1
            """,
            [self._path("recipe_items.parquet"), goods_id],
        ).fetchone()
        if not row:
            logger.warning("unknown goods id %s", goods_id)
            return None
        return Goods(id=row[0], name=row[1] or row[0], is_fluid=RecipeIoType(row[2]).is_fluid)

    def list_recipe_ids(self, limit: int) -> List[str]:
        rows = self.con.execute(
            "select rid from read_parquet(?) order by rid limit ?",
            [self._path("recipes.parquet"), int(limit)],
        ).fetchall()
        return [row[0] for row in rows]


class DataSource:
    def open_repository(self) -> RecipeRepository:
        raise NotImplementedError


class LocalDataSource(DataSource):
    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir

    def open_repository(self) -> DuckDBRepository:
        con = duckdb.connect(database=":memory:")
        return DuckDBRepository(data_dir=self.data_dir, con=con)


class StaticDataSource(DataSource):
    """Serves one shared in-memory repository."""

    def __init__(self, recipes: Iterable[Recipe] = ()) -> None:
        self.repository = InMemoryRepository()
        for recipe in recipes:
            self.repository.add_recipe(recipe)

    def open_repository(self) -> InMemoryRepository:
        return self.repository


def create_data_source(kind: str, data_dir: Path) -> DataSource:
    if kind == "local":
        logger.info("using parquet recipes from %s", data_dir)
        return LocalDataSource(data_dir)
    if kind == "memory":
        return StaticDataSource()
    raise ValueError(f"Unsupported data source: {kind}")
