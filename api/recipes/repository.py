"""
Recipe persistence (raw SQL).

Every statement is a single round-trip; nothing here opens a transaction.
Driver exceptions are translated to `core.errors` types at this boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import asyncpg
from fastapi import Depends

from core.db import Database, get_database
from core.errors import ConflictError, NotFoundError, StoreError

from .schemas import RatedRecipe, Rating, Recipe, RecipeInput

logger = logging.getLogger(__name__)

RECIPE_NOT_FOUND = "Recipe not found"

# Used as the prep-time bound when a search asks for no filter.
NO_PREPTIME_LIMIT = 9999.99


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        raise ConflictError("Recipe with this name already exists") from exc
    except asyncpg.ForeignKeyViolationError as exc:
        raise NotFoundError(RECIPE_NOT_FOUND) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
        logger.error("store_error type=%s message=%s", type(exc).__name__, exc)
        raise StoreError(str(exc)) from exc


def _to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=int(row["id"]),
        name=str(row["name"]),
        prep_time=float(row["preptime"]),
        difficulty=int(row["difficulty"]),
        vegetarian=bool(row["vegetarian"]),
    )


def _to_rated_recipe(row: dict[str, Any]) -> RatedRecipe:
    return RatedRecipe(
        id=int(row["id"]),
        name=str(row["name"]),
        prep_time=float(row["preptime"]),
        difficulty=int(row["difficulty"]),
        vegetarian=bool(row["vegetarian"]),
        avg_rating=float(row["avg_rating"]),
    )


class RecipeRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def ping(self) -> None:
        with _translate_errors():
            await self._db.fetch_one("SELECT 1 AS ok")

    async def get_recipe(self, recipe_id: int) -> Recipe:
        with _translate_errors():
            row = await self._db.fetch_one(
                """
                SELECT id, name, preptime, difficulty, vegetarian
                FROM recipes
                WHERE id = $1
                """,
                recipe_id,
            )
        if row is None:
            raise NotFoundError(RECIPE_NOT_FOUND)
        return _to_recipe(row)

    async def list_recipes(self, *, start: int, count: int) -> list[Recipe]:
        """
        One page of recipes in the store's natural order.
        """
        with _translate_errors():
            rows = await self._db.fetch_all(
                """
                SELECT id, name, preptime, difficulty, vegetarian
                FROM recipes
                LIMIT $1
                OFFSET $2
                """,
                count,
                start,
            )
        return [_to_recipe(row) for row in rows]

    async def create_recipe(self, payload: RecipeInput) -> Recipe:
        with _translate_errors():
            row = await self._db.fetch_one(
                """
                INSERT INTO recipes (name, preptime, difficulty, vegetarian)
                VALUES ($1, $2, $3, $4)
                RETURNING id
                """,
                payload.name,
                payload.prep_time,
                payload.difficulty,
                payload.vegetarian,
            )
        if row is None or "id" not in row:
            raise StoreError("Failed to insert recipe.")
        return Recipe(
            id=int(row["id"]),
            name=payload.name,
            prep_time=payload.prep_time,
            difficulty=payload.difficulty,
            vegetarian=payload.vegetarian,
        )

    async def update_recipe(self, recipe_id: int, payload: RecipeInput) -> Recipe | None:
        """
        Replace every mutable field of a recipe.
        Returns the stored row, or None when no recipe has this id.
        """
        with _translate_errors():
            row = await self._db.fetch_one(
                """
                UPDATE recipes
                SET name = $1,
                    preptime = $2,
                    difficulty = $3,
                    vegetarian = $4
                WHERE id = $5
                RETURNING id, name, preptime, difficulty, vegetarian
                """,
                payload.name,
                payload.prep_time,
                payload.difficulty,
                payload.vegetarian,
                recipe_id,
            )
        return _to_recipe(row) if row is not None else None

    async def delete_recipe(self, recipe_id: int) -> bool:
        """
        Delete a recipe (its ratings go with it via ON DELETE CASCADE).
        Returns False when nothing was deleted.
        """
        with _translate_errors():
            row = await self._db.fetch_one(
                """
                DELETE FROM recipes
                WHERE id = $1
                RETURNING id
                """,
                recipe_id,
            )
        return row is not None

    async def add_rating(self, recipe_id: int, rating: int) -> Rating:
        with _translate_errors():
            row = await self._db.fetch_one(
                """
                INSERT INTO recipe_ratings (recipe_id, rating)
                VALUES ($1, $2)
                RETURNING rating_id
                """,
                recipe_id,
                rating,
            )
        if row is None or "rating_id" not in row:
            raise StoreError("Failed to insert rating.")
        return Rating(rating_id=int(row["rating_id"]), recipe_id=recipe_id, rating=rating)

    async def search_rated(
        self,
        *,
        start: int,
        count: int,
        max_prep_time: float = NO_PREPTIME_LIMIT,
    ) -> list[RatedRecipe]:
        """
        One page of recipes with prep time strictly below `max_prep_time`,
        each with its mean rating (0 when unrated).
        """
        with _translate_errors():
            rows = await self._db.fetch_all(
                """
                SELECT
                  r.id,
                  r.name,
                  r.preptime,
                  r.difficulty,
                  r.vegetarian,
                  (
                    SELECT COALESCE(AVG(rr.rating), 0)
                    FROM recipe_ratings rr
                    WHERE rr.recipe_id = r.id
                  ) AS avg_rating
                FROM recipes r
                WHERE r.preptime < $1
                LIMIT $2
                OFFSET $3
                """,
                max_prep_time,
                count,
                start,
            )
        return [_to_rated_recipe(row) for row in rows]


def get_recipe_repository(db: Database = Depends(get_database)) -> RecipeRepository:
    return RecipeRepository(db)
