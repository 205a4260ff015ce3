"""
JSON file recipe store.

Recipes live under the ``recipes`` key of a single JSON document. The file
is read once on construction and rewritten atomically (temp file then
rename) on every change.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from recipe_adapter.models.recipe import Recipe

logger = logging.getLogger(__name__)


class RecipeStoreError(Exception):
    """Reading or writing the recipe file failed."""


class JsonRecipeStore:
    """
    Recipe store backed by one JSON file.

    Attributes:
        path: Location of the JSON document
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._recipes: Dict[str, Recipe] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.info(f"Recipe store {self.path} does not exist yet; starting empty")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RecipeStoreError(f"Could not read recipe store {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise RecipeStoreError(f"Recipe store {self.path} is not a JSON object")

        for raw in data.get("recipes", []):
            try:
                recipe = Recipe.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping invalid stored recipe {raw.get('id')!r}: {e}")
                continue
            self._recipes[recipe.id] = recipe

        logger.info(f"Loaded {len(self._recipes)} recipes from {self.path}")

    def _write(self, recipes: Dict[str, Recipe]) -> None:
        payload = {"recipes": [r.model_dump(mode="json") for r in recipes.values()]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise RecipeStoreError(f"Could not save recipe store {self.path}: {e}") from e

    def list_recipes(self) -> List[Recipe]:
        return list(self._recipes.values())

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def save_recipe(self, recipe: Recipe) -> Recipe:
        """
        Insert or replace a recipe by id.

        The in-memory state only changes once the file write succeeded.

        Raises:
            RecipeStoreError: If the file could not be written
        """
        updated = dict(self._recipes)
        updated[recipe.id] = recipe
        self._write(updated)
        self._recipes = updated
        logger.debug(f"Saved recipe {recipe.id}")
        return recipe

    def delete_recipe(self, recipe_id: str) -> bool:
        """Remove a recipe; returns False if it did not exist."""
        if recipe_id not in self._recipes:
            return False
        updated = {k: v for k, v in self._recipes.items() if k != recipe_id}
        self._write(updated)
        self._recipes = updated
        logger.info(f"Deleted recipe {recipe_id}")
        return True
