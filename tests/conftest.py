from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.errors import ConflictError, NotFoundError
from main import create_app
from recipes.repository import NO_PREPTIME_LIMIT, get_recipe_repository
from recipes.schemas import RatedRecipe, Rating, Recipe, RecipeInput

AUTH_USER = "chef"
AUTH_PASSWORD = "s3cret-Sauce"


class InMemoryRecipeRepository:
    """
    Stand-in for RecipeRepository with the same constraints as the SQL schema:
    unique names, store-assigned ids, cascade delete of ratings.
    """

    def __init__(self) -> None:
        self.recipes: dict[int, Recipe] = {}
        self.ratings: list[Rating] = []
        self.page_requests: list[tuple[int, int]] = []
        self.search_requests: list[tuple[int, int, float]] = []
        self.ping_error: Exception | None = None
        self._next_id = 1
        self._next_rating_id = 1

    def seed(self, name: str, prep_time: float, difficulty: int = 1, vegetarian: bool = True) -> Recipe:
        recipe = Recipe(
            id=self._next_id,
            name=name,
            prep_time=prep_time,
            difficulty=difficulty,
            vegetarian=vegetarian,
        )
        self.recipes[recipe.id] = recipe
        self._next_id += 1
        return recipe

    def _name_taken(self, name: str, *, exclude_id: int | None = None) -> bool:
        return any(r.name == name and r.id != exclude_id for r in self.recipes.values())

    async def ping(self) -> None:
        if self.ping_error is not None:
            raise self.ping_error

    async def get_recipe(self, recipe_id: int) -> Recipe:
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    async def list_recipes(self, *, start: int, count: int) -> list[Recipe]:
        self.page_requests.append((start, count))
        return list(self.recipes.values())[start : start + count]

    async def create_recipe(self, payload: RecipeInput) -> Recipe:
        if self._name_taken(payload.name):
            raise ConflictError("Recipe with this name already exists")
        return self.seed(payload.name, payload.prep_time, payload.difficulty, payload.vegetarian)

    async def update_recipe(self, recipe_id: int, payload: RecipeInput) -> Recipe | None:
        if recipe_id not in self.recipes:
            return None
        if self._name_taken(payload.name, exclude_id=recipe_id):
            raise ConflictError("Recipe with this name already exists")
        recipe = Recipe(
            id=recipe_id,
            name=payload.name,
            prep_time=payload.prep_time,
            difficulty=payload.difficulty,
            vegetarian=payload.vegetarian,
        )
        self.recipes[recipe_id] = recipe
        return recipe

    async def delete_recipe(self, recipe_id: int) -> bool:
        if self.recipes.pop(recipe_id, None) is None:
            return False
        self.ratings = [r for r in self.ratings if r.recipe_id != recipe_id]
        return True

    async def add_rating(self, recipe_id: int, rating: int) -> Rating:
        if recipe_id not in self.recipes:
            raise NotFoundError("Recipe not found")
        created = Rating(rating_id=self._next_rating_id, recipe_id=recipe_id, rating=rating)
        self._next_rating_id += 1
        self.ratings.append(created)
        return created

    async def search_rated(
        self,
        *,
        start: int,
        count: int,
        max_prep_time: float = NO_PREPTIME_LIMIT,
    ) -> list[RatedRecipe]:
        self.search_requests.append((start, count, max_prep_time))
        matching = [r for r in self.recipes.values() if r.prep_time < max_prep_time]
        rated = []
        for recipe in matching[start : start + count]:
            scores = [r.rating for r in self.ratings if r.recipe_id == recipe.id]
            avg = sum(scores) / len(scores) if scores else 0.0
            rated.append(RatedRecipe(**recipe.model_dump(), avg_rating=avg))
        return rated


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(auth_user=AUTH_USER, auth_password=AUTH_PASSWORD)


@pytest.fixture
def repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def app(settings: Settings, repository: InMemoryRecipeRepository):
    application = create_app(settings)
    application.dependency_overrides[get_recipe_repository] = lambda: repository
    return application


@pytest.fixture
def client(app) -> TestClient:
    # No context manager: the lifespan (and its Postgres pool) is not started.
    return TestClient(app)


@pytest.fixture
def auth() -> tuple[str, str]:
    return (AUTH_USER, AUTH_PASSWORD)
