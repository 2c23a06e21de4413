"""
Recipe API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Path, Query, Request, status
from pydantic import ValidationError

from auth import dependencies as auth_dependencies
from core.errors import ClientInputError

from . import schemas, service
from .repository import RecipeRepository, get_recipe_repository

router = APIRouter(
    prefix="/v1",
    responses={
        code: {"model": schemas.ErrorResponse}
        for code in (
            status.HTTP_400_BAD_REQUEST,
            status.HTTP_404_NOT_FOUND,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    },
)

# Protected writes parse their own body after auth; declare it for OpenAPI.
RECIPE_BODY_OPENAPI = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": schemas.RecipeInput.model_json_schema()}},
    }
}


async def authorized_recipe_input(
    request: Request,
    _: str = Depends(auth_dependencies.require_basic_auth),
) -> schemas.RecipeInput:
    """
    Parse the recipe body only after the caller has been authenticated.
    """
    try:
        body = await request.json()
    except ValueError as exc:
        raise ClientInputError("Invalid request payload") from exc
    try:
        return schemas.RecipeInput.model_validate(body)
    except ValidationError as exc:
        raise ClientInputError("Invalid request payload") from exc


@router.get("/recipes", response_model=list[schemas.Recipe])
async def list_recipes(
    count: str | None = Query(default=None),
    start: str | None = Query(default=None),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> list[schemas.Recipe]:
    return await service.list_recipes(repository, count=count, start=start)


@router.post(
    "/recipes",
    response_model=schemas.Recipe,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=RECIPE_BODY_OPENAPI,
)
async def create_recipe(
    payload: schemas.RecipeInput = Depends(authorized_recipe_input),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> schemas.Recipe:
    return await service.create_recipe(repository, payload)


@router.get("/recipes/{recipe_id}", response_model=schemas.Recipe)
async def get_recipe(
    recipe_id: int = Path(..., ge=service.INT64_MIN, le=service.INT64_MAX),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> schemas.Recipe:
    return await service.get_recipe(repository, recipe_id)


@router.put("/recipes/{recipe_id}", response_model=schemas.Recipe, openapi_extra=RECIPE_BODY_OPENAPI)
@router.patch("/recipes/{recipe_id}", response_model=schemas.Recipe, openapi_extra=RECIPE_BODY_OPENAPI)
async def modify_recipe(
    recipe_id: int = Path(..., ge=service.INT64_MIN, le=service.INT64_MAX),
    payload: schemas.RecipeInput = Depends(authorized_recipe_input),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> schemas.Recipe:
    """
    Full replace. PATCH behaves exactly like PUT; there is no partial merge.
    """
    return await service.update_recipe(repository, recipe_id, payload)


@router.delete("/recipes/{recipe_id}", response_model=schemas.DeleteResult)
async def delete_recipe(
    recipe_id: int = Path(..., ge=service.INT64_MIN, le=service.INT64_MAX),
    _: str = Depends(auth_dependencies.require_basic_auth),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> schemas.DeleteResult:
    return await service.delete_recipe(repository, recipe_id)


@router.post(
    "/recipes/{recipe_id}/rating",
    response_model=schemas.Rating,
    status_code=status.HTTP_201_CREATED,
)
async def add_rating(
    payload: schemas.RatingInput,
    recipe_id: int = Path(..., ge=service.INT64_MIN, le=service.INT64_MAX),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> schemas.Rating:
    return await service.add_rating(repository, recipe_id, payload.rating)


@router.post("/search/recipes", response_model=list[schemas.RatedRecipe])
async def search_recipes(
    count: str | None = Form(default=None),
    start: str | None = Form(default=None),
    preptime: str | None = Form(default=None),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> list[schemas.RatedRecipe]:
    """
    Rated recipes page. Form fields are parsed leniently; `preptime` is an
    exclusive upper bound and is skipped when absent.
    """
    return await service.search_recipes(
        repository,
        count=count,
        start=start,
        preptime=preptime,
    )
