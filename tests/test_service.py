from __future__ import annotations

import pytest

from core.errors import NotFoundError
from recipes import service
from recipes.repository import NO_PREPTIME_LIMIT
from recipes.schemas import RecipeInput


@pytest.mark.parametrize(
    ("count", "expected"),
    [
        ("1", 1),
        ("7", 7),
        ("10", 10),
        ("11", 10),
        ("0", 10),
        ("-3", 10),
        ("abc", 10),
        ("", 10),
        (None, 10),
        ("2.5", 10),
        (" 7", 10),
        ("99999999999999999999", 10),
    ],
)
def test_page_size_outside_range_becomes_ten(count, expected):
    page_size, _ = service.normalize_page(count, "0")
    assert page_size == expected


@pytest.mark.parametrize(
    ("start", "expected"),
    [
        ("0", 0),
        ("4", 4),
        ("+4", 4),
        ("-1", 0),
        ("-500", 0),
        ("soon", 0),
        (None, 0),
        ("", 0),
        (" 4", 0),
        ("1_0", 0),
        ("9223372036854775807", 9223372036854775807),
        ("9223372036854775808", 0),
        ("99999999999999999999", 0),
    ],
)
def test_start_outside_int64_or_not_a_plain_integer_becomes_zero(start, expected):
    _, offset = service.normalize_page("5", start)
    assert offset == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, NO_PREPTIME_LIMIT),
        ("", NO_PREPTIME_LIMIT),
        ("  ", NO_PREPTIME_LIMIT),
        ("30.0", 30.0),
        ("45", 45.0),
        ("half an hour", 0.0),
        ("soon", 0.0),
    ],
)
def test_parse_preptime(raw, expected):
    assert service.parse_preptime(raw) == expected


@pytest.mark.anyio
async def test_update_missing_recipe_raises_not_found(repository):
    payload = RecipeInput(name="Soup", preptime=5, difficulty=1)

    with pytest.raises(NotFoundError):
        await service.update_recipe(repository, 1, payload)


@pytest.mark.anyio
async def test_delete_missing_recipe_raises_not_found(repository):
    with pytest.raises(NotFoundError):
        await service.delete_recipe(repository, 1)


@pytest.mark.anyio
async def test_delete_existing_recipe_reports_success(repository):
    recipe = repository.seed("Soup", 5.0)

    result = await service.delete_recipe(repository, recipe.id)

    assert result.model_dump() == {"result": "success"}
