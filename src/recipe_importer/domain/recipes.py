"""Domain models for recipes and collections."""

from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecipeRecord(BaseModel):
    """Recipe fields supplied by the browser form or the AI extraction stage.

    Required fields are optional at the type level so that missing values
    reach import validation instead of failing during parsing.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    ingredients: list[str] | None = None
    instructions: list[str] = Field(default_factory=list)
    note: str | None = Field(
        default=None,
        validation_alias=AliasChoices("note", "notes"),
        serialization_alias="notes",
    )
    cook_time: int | None = Field(default=None, ge=0)
    prep_time: int | None = Field(default=None, ge=0)
    servings: str | None = None
    collection_id: str | None = None


@dataclass(frozen=True)
class CreatedRecipe:
    """A recipe persisted by the list service."""

    identifier: str
    name: str
    linked_to_master_index: bool = True


@dataclass(frozen=True)
class Collection:
    """Named grouping of recipe identifiers maintained by the list service."""

    identifier: str
    name: str
    recipe_ids: tuple[str, ...] = ()

    def contains(self, recipe_id: str) -> bool:
        """Return true when the recipe is filed in this collection."""
        return recipe_id in self.recipe_ids


@dataclass(frozen=True)
class RecipeDataContext:
    """Snapshot-derived context needed for recipe writes."""

    recipe_data_id: str
    master_collection_id: str | None


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a recipe import."""

    recipe_id: str
    created: bool = True
    collection_warning: str | None = None
    visibility_warning: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Serialize using the browser client's field names."""
        payload: dict[str, object] = {
            "recipeId": self.recipe_id,
            "created": self.created,
        }
        if self.collection_warning:
            payload["collectionWarning"] = self.collection_warning
        if self.visibility_warning:
            payload["visibilityWarning"] = self.visibility_warning
        return payload
