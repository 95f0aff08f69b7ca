"""
Recipe service.

Stores user recipes with embedded ingredients. Recipe names are unique per
user through a compound unique index.
"""

import logging
from typing import Optional, List, Dict, Any, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from sharp.database import collections
from sharp.database.documents import parse_object_id, utcnow

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "servings",
    "prepTimeMinutes",
    "cookTimeMinutes",
    "instructions",
    "tags",
    "isPublic",
)


def validate_ingredients(ingredients: Optional[List[Dict[str, Any]]]) -> List[Dict[str, str]]:
    """
    Check the ingredient list.

    Returns:
        Field errors; empty when valid
    """
    if not ingredients:
        return [{"field": "ingredients", "message": "At least one ingredient is required"}]

    errors = []
    for index, ingredient in enumerate(ingredients):
        quantity = ingredient.get("quantity")
        if quantity is None or quantity <= 0:
            errors.append({
                "field": f"ingredients[{index}].quantity",
                "message": "Quantity must be greater than 0",
            })
        if not (ingredient.get("unit") or "").strip():
            errors.append({
                "field": f"ingredients[{index}].unit",
                "message": "Unit is required",
            })
    return errors


def _ingredient_records(ingredients: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "name": ingredient.get("name"),
            "quantity": float(ingredient["quantity"]),
            "unit": ingredient["unit"].strip(),
            "notes": ingredient.get("notes"),
            "orderIndex": index,
        }
        for index, ingredient in enumerate(ingredients)
    ]


class RecipeService:
    """
    Handles recipe CRUD and visibility rules.
    """

    def __init__(self, db: AsyncIOMotorDatabase, max_page_size: int = 50):
        """
        Initialize RecipeService.

        Args:
            db: MongoDB database connection
            max_page_size: Upper bound for list page size
        """
        self._db = db
        self._recipes_collection = db[collections.RECIPES]
        self._max_page_size = max_page_size

    async def list_recipes(
        self,
        user_id: str,
        include_public: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        List the user's recipes, plus public ones when include_public.

        Returns:
            Tuple of (recipes newest first, total matching)
        """
        limit = min(limit, self._max_page_size)

        if include_public:
            query: Dict[str, Any] = {"$or": [{"userId": ObjectId(user_id)}, {"isPublic": True}]}
        else:
            query = {"userId": ObjectId(user_id)}

        total = await self._recipes_collection.count_documents(query)

        cursor = self._recipes_collection.find(query)
        cursor = cursor.sort("createdAt", -1).skip(offset).limit(limit)
        recipes = await cursor.to_list(length=limit)

        return recipes, total

    async def create_recipe(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a recipe.

        Raises:
            ValidationException: Missing name or invalid ingredients
            ConflictException: User already has a recipe with this name
        """
        name = (data.get("name") or "").strip()
        errors = [] if name else [{"field": "name", "message": "Recipe name is required"}]
        errors.extend(validate_ingredients(data.get("ingredients")))
        if errors:
            raise ValidationException(message="Invalid recipe", errors=errors)

        now = utcnow()
        recipe = {
            "userId": ObjectId(user_id),
            "name": name,
            "description": (data.get("description") or "").strip() or None,
            "servings": data.get("servings") or 1,
            "prepTimeMinutes": data.get("prepTimeMinutes"),
            "cookTimeMinutes": data.get("cookTimeMinutes"),
            "instructions": data.get("instructions"),
            "tags": data.get("tags") or [],
            "isPublic": bool(data.get("isPublic", False)),
            "ingredients": _ingredient_records(data["ingredients"]),
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            result = await self._recipes_collection.insert_one(recipe)
        except DuplicateKeyError:
            raise ConflictException(
                message="A recipe with this name already exists",
                code="RECIPE_EXISTS",
            )

        recipe["_id"] = result.inserted_id
        logger.info(f"Recipe {result.inserted_id} created by user {user_id}")
        return recipe

    async def get_recipe(self, recipe_id: str, user_id: str) -> Dict[str, Any]:
        """
        Get a recipe visible to the user.

        Raises:
            NotFoundException: Recipe does not exist
            ForbiddenException: Recipe is private and owned by someone else
        """
        recipe = await self._recipes_collection.find_one(
            {"_id": parse_object_id(recipe_id, "Recipe")}
        )
        if not recipe:
            raise NotFoundException(message="Recipe not found", code="RECIPE_NOT_FOUND")

        if recipe["userId"] != ObjectId(user_id) and not recipe.get("isPublic"):
            raise ForbiddenException(message="Access denied", code="RECIPE_ACCESS_DENIED")

        return recipe

    async def update_recipe(
        self,
        recipe_id: str,
        user_id: str,
        updates: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Update an owned recipe. Ingredients, when given, replace the list.

        Raises:
            NotFoundException: No such recipe for this user
            ValidationException: Empty name or invalid ingredients
            ConflictException: Name clashes with another of the user's recipes
        """
        fields = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS and v is not None}

        errors = []
        if "name" in fields:
            fields["name"] = fields["name"].strip()
            if not fields["name"]:
                errors.append({"field": "name", "message": "Recipe name is required"})

        if updates.get("ingredients") is not None:
            errors.extend(validate_ingredients(updates["ingredients"]))
            if not errors:
                fields["ingredients"] = _ingredient_records(updates["ingredients"])

        if errors:
            raise ValidationException(message="Invalid recipe", errors=errors)

        fields["updatedAt"] = utcnow()

        try:
            recipe = await self._recipes_collection.find_one_and_update(
                {"_id": parse_object_id(recipe_id, "Recipe"), "userId": ObjectId(user_id)},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictException(
                message="A recipe with this name already exists",
                code="RECIPE_EXISTS",
            )

        if not recipe:
            raise NotFoundException(message="Recipe not found", code="RECIPE_NOT_FOUND")

        return recipe

    async def delete_recipe(self, recipe_id: str, user_id: str) -> None:
        """
        Delete an owned recipe.

        Raises:
            NotFoundException: No such recipe for this user
        """
        result = await self._recipes_collection.delete_one({
            "_id": parse_object_id(recipe_id, "Recipe"),
            "userId": ObjectId(user_id),
        })
        if result.deleted_count == 0:
            raise NotFoundException(message="Recipe not found", code="RECIPE_NOT_FOUND")

        logger.info(f"Recipe {recipe_id} deleted by user {user_id}")
