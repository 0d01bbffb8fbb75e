"""Import orchestration: create a recipe, then optionally file it."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from recipe_importer.domain.errors import RecipeImportError, ValidationError
from recipe_importer.domain.recipes import ImportResult, RecipeRecord
from recipe_importer.services.collections import CollectionAttacher
from recipe_importer.services.recipes import RecipeCreator, validate_record

_logger = logging.getLogger(__name__)


@dataclass
class ImportOrchestrator:
    """Application service for importing a reviewed recipe."""

    creator: RecipeCreator
    attacher: CollectionAttacher

    async def import_recipe(
        self, record: RecipeRecord | Mapping[str, object]
    ) -> ImportResult:
        """Create the recipe and file it into the requested collection.

        Creation failures propagate. Filing failures, and a recipe that was
        saved but not linked into the master collection, are reported as
        warnings on an otherwise successful result so the caller does not
        import it again.
        """
        parsed = parse_record(record)
        validate_record(parsed)
        created = await self.creator.create_recipe(parsed)

        warning = None
        if parsed.collection_id:
            try:
                await self.attacher.attach_to_collection(
                    created.identifier, parsed.collection_id
                )
            except RecipeImportError as exc:
                _logger.warning(
                    "Recipe %s created but not filed into collection %s: %s",
                    created.identifier,
                    parsed.collection_id,
                    exc,
                )
                warning = (
                    f"Recipe was saved but could not be added to the selected "
                    f"collection ({exc}). Please file it manually."
                )
        visibility_warning = None
        if not created.linked_to_master_index:
            visibility_warning = (
                "Recipe was saved but may not appear in All Recipes. "
                "Add it there manually instead of importing it again."
            )
        return ImportResult(
            recipe_id=created.identifier,
            collection_warning=warning,
            visibility_warning=visibility_warning,
        )


def parse_record(record: RecipeRecord | Mapping[str, object]) -> RecipeRecord:
    """Coerce caller input into a RecipeRecord."""
    if isinstance(record, RecipeRecord):
        return record
    if not isinstance(record, Mapping):
        raise ValidationError("Recipe payload must be an object")
    try:
        return RecipeRecord.model_validate(dict(record))
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else error["msg"])
    return "Invalid recipe: " + "; ".join(parts)
