"""
FastAPI router for FeelSharper recipes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from common.utils import paginated_response, success_response
from sharp.config import settings
from sharp.dependencies import get_recipe_service, require_auth
from sharp.pipelines import fitness as pipelines
from sharp.schemas.fitness import RecipeCreateRequest, RecipeUpdateRequest
from sharp.services.fitness.recipe_service import RecipeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    user: Annotated[dict, Depends(require_auth)],
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
    public: bool = Query(True, description="Include other users' public recipes"),
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
):
    """List own recipes, plus public ones unless public=false. Limit is capped."""
    limit = min(limit, settings.RECIPES_MAX_PAGE_SIZE)
    recipes, total = await pipelines.list_recipes_pipeline(
        recipe_service=recipe_service,
        user_id=str(user["_id"]),
        include_public=public,
        limit=limit,
        offset=offset,
    )
    return paginated_response(recipes, total, limit=limit, offset=offset)


@router.post("", status_code=201)
async def create_recipe(
    body: RecipeCreateRequest,
    user: Annotated[dict, Depends(require_auth)],
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    recipe = await pipelines.create_recipe_pipeline(
        recipe_service=recipe_service,
        user_id=str(user["_id"]),
        data=body.model_dump(),
    )
    return success_response(recipe, "Recipe created")


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: str,
    user: Annotated[dict, Depends(require_auth)],
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    recipe = await pipelines.get_recipe_pipeline(recipe_service, str(user["_id"]), recipe_id)
    return success_response(recipe)


@router.put("/{recipe_id}")
async def update_recipe(
    recipe_id: str,
    body: RecipeUpdateRequest,
    user: Annotated[dict, Depends(require_auth)],
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Update an owned recipe. A given ingredient list replaces the old one."""
    recipe = await pipelines.update_recipe_pipeline(
        recipe_service=recipe_service,
        user_id=str(user["_id"]),
        recipe_id=recipe_id,
        updates=body.model_dump(exclude_none=True),
    )
    return success_response(recipe, "Recipe updated")


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: str,
    user: Annotated[dict, Depends(require_auth)],
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    await pipelines.delete_recipe_pipeline(recipe_service, str(user["_id"]), recipe_id)
    return success_response(message="Recipe deleted")
