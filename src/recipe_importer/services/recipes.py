"""Recipe creation against the remote list service."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from uuid import uuid4

from recipe_importer.domain.errors import RecipeImportError, ValidationError
from recipe_importer.domain.recipes import CreatedRecipe, RecipeRecord
from recipe_importer.services.collections import CollectionIndex
from recipe_importer.services.remote_session import RemoteSession

_logger = logging.getLogger(__name__)


@dataclass
class RecipeCreator:
    """Creates recipes and links them into the master recipe collection."""

    session: RemoteSession
    index: CollectionIndex
    clock: Callable[[], float] = time.time

    async def create_recipe(self, record: RecipeRecord) -> CreatedRecipe:
        """Create a recipe that is visible in the account's recipe list.

        The snapshot is always refreshed before saving because the save call
        needs the current recipe-data container id. After saving, the recipe
        is explicitly added to the "all recipes" collection since the save
        call does not reliably link it there.
        """
        validate_record(record)
        name = (record.name or "").strip()
        await self.session.ensure_authenticated()
        await self.session.resolve_user_id()
        context = await self.index.recipe_data_context(force_refresh=True)

        identifier = uuid4().hex
        payload = build_recipe_payload(
            record, identifier=identifier, created_at=self.clock()
        )
        await self.session.save_recipe(context.recipe_data_id, payload)
        _logger.info("Saved recipe %s (%s)", identifier, name)

        master_id = context.master_collection_id
        if master_id is None:
            _logger.warning(
                "Snapshot has no master recipe collection; refreshing once"
            )
            context = await self.index.recipe_data_context(force_refresh=True)
            master_id = context.master_collection_id
        if master_id is None:
            _logger.warning(
                "Recipe %s saved but not linked to the master collection: "
                "snapshot is degraded",
                identifier,
            )
            return CreatedRecipe(
                identifier=identifier, name=name, linked_to_master_index=False
            )

        try:
            await self.session.add_recipes_to_collection(
                context.recipe_data_id, master_id, [identifier]
            )
        except RecipeImportError as exc:
            _logger.warning(
                "Recipe %s saved but linking to the master collection failed: %s",
                identifier,
                exc,
            )
            return CreatedRecipe(
                identifier=identifier, name=name, linked_to_master_index=False
            )
        _logger.info("Linked recipe %s to master collection", identifier)
        return CreatedRecipe(identifier=identifier, name=name)


def validate_record(record: RecipeRecord) -> None:
    """Require a non-empty name and an ingredient list."""
    if not record.name or not record.name.strip():
        raise ValidationError("Recipe name is required")
    if record.ingredients is None:
        raise ValidationError("Recipe ingredients are required")


def build_recipe_payload(
    record: RecipeRecord, *, identifier: str, created_at: float
) -> dict[str, object]:
    """Build the service-native recipe representation."""
    return {
        "identifier": identifier,
        "name": (record.name or "").strip(),
        "note": record.note or "",
        "cookTime": record.cook_time or 0,
        "prepTime": record.prep_time or 0,
        "servings": record.servings or "",
        "preparationSteps": _clean_lines(record.instructions),
        "ingredients": [
            _ingredient(text) for text in _clean_lines(record.ingredients or [])
        ],
        "creationTimestamp": created_at,
    }


def _ingredient(text: str) -> dict[str, object]:
    """Wrap free text as an unparsed ingredient."""
    return {"identifier": uuid4().hex, "name": text, "rawIngredient": text}


def _clean_lines(lines: list[str]) -> list[str]:
    return [line.strip() for line in lines if line and line.strip()]
