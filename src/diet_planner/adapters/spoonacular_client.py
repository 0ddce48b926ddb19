"""Spoonacular recipe API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class RecipeProviderClient(Protocol):
    """Interface for external recipe search."""

    async def search_recipes(
        self, params: dict[str, object]
    ) -> dict[str, object]:
        """Run a complex search and return raw API data."""

    async def random_recipes(self, number: int) -> dict[str, object]:
        """Fetch random recipes and return raw API data."""

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Fetch one recipe with nutrition and return raw API data."""


@dataclass
class HttpxSpoonacularClient(RecipeProviderClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxSpoonacularClient":
        """Create a client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_recipes(
        self, params: dict[str, object]
    ) -> dict[str, object]:
        url = f"{self.base_url}/recipes/complexSearch"
        response = await self.http_client.get(
            url,
            params={"apiKey": self.api_key, **params},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def random_recipes(self, number: int) -> dict[str, object]:
        url = f"{self.base_url}/recipes/random"
        response = await self.http_client.get(
            url,
            params={
                "apiKey": self.api_key,
                "number": number,
                "includeNutrition": "true",
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        url = f"{self.base_url}/recipes/{recipe_id}/information"
        response = await self.http_client.get(
            url,
            params={"apiKey": self.api_key, "includeNutrition": "true"},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
