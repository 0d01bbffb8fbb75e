"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from recipe_importer.adapters.list_service_client import (
    ListServiceClient,
    LoginResult,
)
from recipe_importer.config import Settings
from recipe_importer.containers import AppContainer
from recipe_importer.services.collections import CollectionAttacher, CollectionIndex
from recipe_importer.services.imports import ImportOrchestrator
from recipe_importer.services.recipes import RecipeCreator
from recipe_importer.services.remote_session import RemoteSession
from recipe_importer.services.vision import RecipeScanService, VisionClient

ACCOUNT_EMAIL = "cook@example.com"
MASTER_ID = "all-recipes"
RECIPE_DATA_ID = "recipe-data-1"


@dataclass
class FakeListServiceClient(ListServiceClient):
    """In-memory list service that records calls and applies writes."""

    email: str = ACCOUNT_EMAIL
    password: str = "secret"
    user_id: str = "user-42"
    login_returns_user_id: bool = False
    shared_users: list[dict[str, object]] = field(
        default_factory=lambda: [
            {"email": "Friend@Example.com", "userId": "user-7"},
            {"email": "COOK@example.com", "userId": "user-42"},
        ]
    )
    include_master: bool = True
    collections: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            MASTER_ID: {"name": "All Recipes", "recipe_ids": []},
            "col-main": {"name": "Main Dishes", "recipe_ids": []},
            "col-dessert": {"name": "Desserts", "recipe_ids": []},
        }
    )
    recipes: dict[str, dict[str, object]] = field(default_factory=dict)
    login_calls: int = 0
    fetch_calls: int = 0
    save_calls: int = 0
    add_calls: list[tuple[str, list[str]]] = field(default_factory=list)
    fail_login: bool = False
    fetch_error: Exception | None = None
    fetch_error_after: int = 0
    save_error: Exception | None = None
    add_error: Exception | None = None
    master_add_error: Exception | None = None
    login_delay: float = 0.0
    closed: bool = False

    async def login(self, email: str, password: str) -> LoginResult:
        self.login_calls += 1
        if self.login_delay:
            await asyncio.sleep(self.login_delay)
        if self.fail_login or email != self.email or password != self.password:
            raise RuntimeError("invalid credentials")
        return LoginResult(
            access_token=f"token-{self.login_calls}",
            user_id=self.user_id if self.login_returns_user_id else None,
        )

    async def fetch_user_data(self, access_token: str) -> dict[str, object]:
        self.fetch_calls += 1
        if self.fetch_error is not None and self.fetch_calls > self.fetch_error_after:
            raise self.fetch_error
        return self.user_data()

    async def save_recipe(
        self,
        access_token: str,
        *,
        recipe_data_id: str,
        recipe: dict[str, object],
        user_id: str | None,
    ) -> None:
        self.save_calls += 1
        if self.save_error is not None:
            raise self.save_error
        assert recipe_data_id == RECIPE_DATA_ID
        self.recipes[str(recipe["identifier"])] = recipe

    async def add_recipes_to_collection(  # noqa: PLR0913
        self,
        access_token: str,
        *,
        recipe_data_id: str,
        collection_id: str,
        recipe_ids: list[str],
        user_id: str | None,
    ) -> None:
        self.add_calls.append((collection_id, recipe_ids))
        if self.add_error is not None and collection_id != MASTER_ID:
            raise self.add_error
        if self.master_add_error is not None and collection_id == MASTER_ID:
            raise self.master_add_error
        members = self.collections[collection_id]["recipe_ids"]
        assert isinstance(members, list)
        members.extend(recipe_ids)

    async def close(self) -> None:
        self.closed = True

    def user_data(self) -> dict[str, object]:
        collections = [
            {"identifier": key, "name": value["name"], "recipeIds": value["recipe_ids"]}
            for key, value in self.collections.items()
            if self.include_master or key != MASTER_ID
        ]
        return {
            "shoppingListsResponse": {
                "newLists": [
                    {
                        "identifier": "list-1",
                        "name": "Groceries",
                        "sharedUsers": self.shared_users,
                    }
                ]
            },
            "recipeDataResponse": {
                "recipeDataId": RECIPE_DATA_ID,
                "allRecipesId": MASTER_ID if self.include_master else None,
                "recipes": [
                    {"identifier": key, "name": value["name"]}
                    for key, value in self.recipes.items()
                ],
                "recipeCollections": collections,
            },
        }

    def master_recipe_ids(self) -> list[str]:
        members = self.collections[MASTER_ID]["recipe_ids"]
        assert isinstance(members, list)
        return members


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed recipe payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "name": "Apple Pie",
            "ingredients": ["6 apples", "1/2 cup sugar"],
            "instructions": ["Slice apples", "Bake 45 minutes"],
            "notes": "Butter or margarine works",
            "cookTime": 2700,
            "prepTime": None,
            "servings": "8 servings",
        }
    )
    calls: list[dict[str, object]] = field(default_factory=list)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append({"model": model, "image_data_url": image_data_url})
        return self.payload


def build_services(
    client: FakeListServiceClient,
) -> tuple[RemoteSession, CollectionIndex, RecipeCreator, ImportOrchestrator]:
    """Wire the import services around a fake list service."""
    session = RemoteSession(client=client, email=ACCOUNT_EMAIL, password="secret")
    index = CollectionIndex(session)
    creator = RecipeCreator(session=session, index=index, clock=lambda: 1700000000.0)
    attacher = CollectionAttacher(session=session, index=index)
    orchestrator = ImportOrchestrator(creator=creator, attacher=attacher)
    return session, index, creator, orchestrator


@pytest.fixture
def settings() -> Settings:
    return Settings(
        list_service_email=ACCOUNT_EMAIL,
        list_service_password="secret",
        list_service_base_url="https://lists.test",
        openai_api_key="openai-key",
        environment="test",
    )


@pytest.fixture
def list_client() -> FakeListServiceClient:
    return FakeListServiceClient()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def container(
    settings: Settings,
    list_client: FakeListServiceClient,
    vision_client: FakeVisionClient,
) -> AppContainer:
    session, index, creator, orchestrator = build_services(list_client)
    scan_service = RecipeScanService(
        client=vision_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )

    async def close_resources() -> None:
        await session.close()

    return AppContainer(
        settings=settings,
        session=session,
        collection_index=index,
        recipe_creator=creator,
        collection_attacher=orchestrator.attacher,
        import_orchestrator=orchestrator,
        scan_service=scan_service,
        close_resources=close_resources,
    )
