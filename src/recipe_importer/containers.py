"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from recipe_importer.adapters.list_service_client import HttpxListServiceClient
from recipe_importer.adapters.openai_vision_client import OpenAIVisionClient
from recipe_importer.config import Settings
from recipe_importer.services.collections import CollectionAttacher, CollectionIndex
from recipe_importer.services.imports import ImportOrchestrator
from recipe_importer.services.recipes import RecipeCreator
from recipe_importer.services.remote_session import RemoteSession
from recipe_importer.services.vision import RecipeScanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session: RemoteSession
    collection_index: CollectionIndex
    recipe_creator: RecipeCreator
    collection_attacher: CollectionAttacher
    import_orchestrator: ImportOrchestrator
    scan_service: RecipeScanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    list_client = HttpxListServiceClient.create(
        base_url=resolved_settings.list_service_base_url,
        timeout_seconds=resolved_settings.list_service_timeout_seconds,
    )
    session = RemoteSession(
        client=list_client,
        email=resolved_settings.list_service_email,
        password=resolved_settings.list_service_password,
    )
    collection_index = CollectionIndex(session)
    recipe_creator = RecipeCreator(session=session, index=collection_index)
    collection_attacher = CollectionAttacher(session=session, index=collection_index)
    import_orchestrator = ImportOrchestrator(
        creator=recipe_creator, attacher=collection_attacher
    )
    vision_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)
    scan_service = RecipeScanService(
        client=vision_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await session.close()
        await vision_client.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        collection_index=collection_index,
        recipe_creator=recipe_creator,
        collection_attacher=collection_attacher,
        import_orchestrator=import_orchestrator,
        scan_service=scan_service,
        close_resources=close_resources,
    )
