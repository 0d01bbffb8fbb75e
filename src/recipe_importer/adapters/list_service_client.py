"""HTTP client for the remote list service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

import httpx


@dataclass(frozen=True)
class LoginResult:
    """Tokens returned by a successful login."""

    access_token: str
    user_id: str | None = None


class ListServiceClient(Protocol):
    """Interface for list service interactions."""

    async def login(self, email: str, password: str) -> LoginResult:
        """Exchange credentials for an access token."""

    async def fetch_user_data(self, access_token: str) -> dict[str, object]:
        """Return the raw user-data document."""

    async def save_recipe(
        self,
        access_token: str,
        *,
        recipe_data_id: str,
        recipe: dict[str, object],
        user_id: str | None,
    ) -> None:
        """Persist a recipe in the account's recipe data."""

    async def add_recipes_to_collection(  # noqa: PLR0913
        self,
        access_token: str,
        *,
        recipe_data_id: str,
        collection_id: str,
        recipe_ids: list[str],
        user_id: str | None,
    ) -> None:
        """Add recipe ids to a collection."""

    async def close(self) -> None:
        """Release client resources."""


@dataclass
class HttpxListServiceClient(ListServiceClient):
    """HTTPX-backed list service client."""

    base_url: str
    http_client: httpx.AsyncClient
    client_identifier: str
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 15
    ) -> "HttpxListServiceClient":
        """Create a list service client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            client_identifier=uuid4().hex,
            timeout_seconds=timeout_seconds,
        )

    async def login(self, email: str, password: str) -> LoginResult:
        """Log in with email and password."""
        response = await self.http_client.post(
            f"{self.base_url}/auth/token",
            data={"email": email, "password": password},
            headers=self._headers(),
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
        access_token = payload.get("access_token")
        if not access_token:
            raise RuntimeError("Login response did not include an access token")
        return LoginResult(access_token=access_token, user_id=payload.get("user_id"))

    async def fetch_user_data(self, access_token: str) -> dict[str, object]:
        """Fetch the user-data document."""
        response = await self.http_client.post(
            f"{self.base_url}/data/user-data/get",
            headers=self._headers(access_token),
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def save_recipe(
        self,
        access_token: str,
        *,
        recipe_data_id: str,
        recipe: dict[str, object],
        user_id: str | None,
    ) -> None:
        """Send a save-recipe operation."""
        await self._send_recipe_operation(
            access_token,
            _operation(
                "save-recipe",
                user_id,
                recipeDataId=recipe_data_id,
                recipes=[recipe],
            ),
        )

    async def add_recipes_to_collection(  # noqa: PLR0913
        self,
        access_token: str,
        *,
        recipe_data_id: str,
        collection_id: str,
        recipe_ids: list[str],
        user_id: str | None,
    ) -> None:
        """Send an add-recipes-to-collection operation."""
        await self._send_recipe_operation(
            access_token,
            _operation(
                "add-recipes-to-collection",
                user_id,
                recipeDataId=recipe_data_id,
                recipeCollectionId=collection_id,
                recipeIds=recipe_ids,
            ),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send_recipe_operation(
        self, access_token: str, operation: dict[str, object]
    ) -> None:
        response = await self.http_client.post(
            f"{self.base_url}/data/user-recipe-data/update",
            json={"operations": [operation]},
            headers=self._headers(access_token),
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"X-Client-Identifier": self.client_identifier}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers


def _operation(
    handler_id: str, user_id: str | None, **fields: object
) -> dict[str, object]:
    """Build a recipe-data operation with fresh metadata."""
    metadata: dict[str, object] = {
        "operationId": uuid4().hex,
        "handlerId": handler_id,
    }
    if user_id:
        metadata["userId"] = user_id
    return {"metadata": metadata, **fields}
