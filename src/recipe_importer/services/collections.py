"""Read-through collection index and collection filing."""

import logging
from dataclasses import dataclass

from recipe_importer.domain.errors import NotFoundError, RemoteServiceError
from recipe_importer.domain.recipes import Collection, RecipeDataContext
from recipe_importer.domain.user_data import RawRecipeCollection, UserDataSnapshot
from recipe_importer.services.remote_session import RemoteSession

_logger = logging.getLogger(__name__)


@dataclass
class CollectionIndex:
    """View over the session snapshot's recipe collections."""

    session: RemoteSession

    async def find_collection(
        self, collection_id: str, force_refresh: bool = False
    ) -> Collection:
        """Return a collection by identifier or raise NotFoundError."""
        snapshot = await self.session.get_user_data_snapshot(force_refresh)
        for raw in snapshot.recipe_data_response.recipe_collections:
            if raw.identifier == collection_id:
                return _to_collection(raw)
        raise NotFoundError(collection_id)

    async def list_collections(self, force_refresh: bool = False) -> list[Collection]:
        """Return the named collections a recipe can be filed into."""
        snapshot = await self.session.get_user_data_snapshot(force_refresh)
        master_id = snapshot.recipe_data_response.all_recipes_id
        return [
            _to_collection(raw)
            for raw in snapshot.recipe_data_response.recipe_collections
            if raw.identifier != master_id
        ]

    async def recipe_data_context(
        self, force_refresh: bool = False
    ) -> RecipeDataContext:
        """Return the recipe-data container and master collection ids."""
        snapshot = await self.session.get_user_data_snapshot(force_refresh)
        return _recipe_data_context(snapshot)


@dataclass
class CollectionAttacher:
    """Files existing recipes into named collections."""

    session: RemoteSession
    index: CollectionIndex

    async def attach_to_collection(self, recipe_id: str, collection_id: str) -> None:
        """Add a recipe to a collection, skipping the write if already filed."""
        collection = await self.index.find_collection(
            collection_id, force_refresh=True
        )
        if collection.contains(recipe_id):
            _logger.info(
                "Recipe %s already in collection %s", recipe_id, collection.name
            )
            return
        context = await self.index.recipe_data_context()
        await self.session.add_recipes_to_collection(
            context.recipe_data_id, collection.identifier, [recipe_id]
        )
        _logger.info("Added recipe %s to collection %s", recipe_id, collection.name)


def _to_collection(raw: RawRecipeCollection) -> Collection:
    return Collection(
        identifier=raw.identifier,
        name=raw.name,
        recipe_ids=tuple(raw.recipe_ids),
    )


def _recipe_data_context(snapshot: UserDataSnapshot) -> RecipeDataContext:
    recipe_data = snapshot.recipe_data_response
    if not recipe_data.recipe_data_id:
        raise RemoteServiceError("User data snapshot has no recipe data id")
    return RecipeDataContext(
        recipe_data_id=recipe_data.recipe_data_id,
        master_collection_id=recipe_data.all_recipes_id or None,
    )
