"""
Recipe business logic.

Scope:
- lenient parsing of pagination and search form values
- not-found checks for update/delete (the store reports zero rows, not an error)
- logging of successful writes
"""

from __future__ import annotations

import logging
import re

from core.errors import NotFoundError

from .repository import NO_PREPTIME_LIMIT, RECIPE_NOT_FOUND, RecipeRepository
from .schemas import DeleteResult, RatedRecipe, Rating, Recipe, RecipeInput

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 10

# Ids and offsets are BIGINT in the store.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_PLAIN_INTEGER = re.compile(r"[+-]?[0-9]+")


def _lenient_int(raw: str | None) -> int:
    # Anything but a plain base-10 int64 counts as 0, like an ignored parse error.
    if raw is None or not _PLAIN_INTEGER.fullmatch(raw):
        return 0
    value = int(raw)
    if value < INT64_MIN or value > INT64_MAX:
        return 0
    return value


def normalize_page(count: str | None, start: str | None) -> tuple[int, int]:
    """
    Return (count, start) for a paginated endpoint.

    count outside [1, MAX_PAGE_SIZE] becomes MAX_PAGE_SIZE; negative start becomes 0.
    """
    page_size = _lenient_int(count)
    offset = _lenient_int(start)
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE
    if offset < 0:
        offset = 0
    return page_size, offset


def parse_preptime(raw: str | None) -> float:
    """
    Absent or blank means no limit; an unparseable value is treated as 0.
    """
    value = (raw or "").strip()
    if not value:
        return NO_PREPTIME_LIMIT
    try:
        return float(value)
    except ValueError:
        return 0.0


async def list_recipes(
    repository: RecipeRepository,
    *,
    count: str | None,
    start: str | None,
) -> list[Recipe]:
    page_size, offset = normalize_page(count, start)
    return await repository.list_recipes(start=offset, count=page_size)


async def get_recipe(repository: RecipeRepository, recipe_id: int) -> Recipe:
    return await repository.get_recipe(recipe_id)


async def create_recipe(repository: RecipeRepository, payload: RecipeInput) -> Recipe:
    recipe = await repository.create_recipe(payload)
    logger.info("recipe_created id=%s name=%r", recipe.id, recipe.name)
    return recipe


async def update_recipe(
    repository: RecipeRepository,
    recipe_id: int,
    payload: RecipeInput,
) -> Recipe:
    recipe = await repository.update_recipe(recipe_id, payload)
    if recipe is None:
        raise NotFoundError(RECIPE_NOT_FOUND)
    logger.info("recipe_updated id=%s", recipe.id)
    return recipe


async def delete_recipe(repository: RecipeRepository, recipe_id: int) -> DeleteResult:
    deleted = await repository.delete_recipe(recipe_id)
    if not deleted:
        raise NotFoundError(RECIPE_NOT_FOUND)
    logger.info("recipe_deleted id=%s", recipe_id)
    return DeleteResult()


async def add_rating(repository: RecipeRepository, recipe_id: int, rating: int) -> Rating:
    created = await repository.add_rating(recipe_id, rating)
    logger.info(
        "rating_added recipe_id=%s rating_id=%s rating=%s",
        created.recipe_id,
        created.rating_id,
        created.rating,
    )
    return created


async def search_recipes(
    repository: RecipeRepository,
    *,
    count: str | None,
    start: str | None,
    preptime: str | None,
) -> list[RatedRecipe]:
    max_prep_time = parse_preptime(preptime)
    page_size, offset = normalize_page(count, start)
    return await repository.search_rated(
        start=offset,
        count=page_size,
        max_prep_time=max_prep_time,
    )
