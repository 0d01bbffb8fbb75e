"""Models mirroring the list service's raw user-data document."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RawModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class SharedUser(_RawModel):
    """Member of a shared list."""

    email: str | None = None
    user_id: str | None = None
    full_name: str | None = None


class UserList(_RawModel):
    """A shopping or user list with its sharing metadata."""

    identifier: str
    name: str = ""
    shared_users: list[SharedUser] = Field(default_factory=list)


class ShoppingListsResponse(_RawModel):
    new_lists: list[UserList] = Field(default_factory=list)


class RawRecipe(_RawModel):
    identifier: str
    name: str = ""


class RawRecipeCollection(_RawModel):
    identifier: str
    name: str = ""
    recipe_ids: list[str] = Field(default_factory=list)


class RecipeDataResponse(_RawModel):
    recipe_data_id: str | None = None
    all_recipes_id: str | None = None
    recipes: list[RawRecipe] = Field(default_factory=list)
    recipe_collections: list[RawRecipeCollection] = Field(default_factory=list)


class UserDataSnapshot(_RawModel):
    """Read-only snapshot of the account's lists, recipes, and collections."""

    shopping_lists_response: ShoppingListsResponse = Field(
        default_factory=ShoppingListsResponse
    )
    recipe_data_response: RecipeDataResponse = Field(
        default_factory=RecipeDataResponse
    )
