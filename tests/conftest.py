"""Shared fixtures for menu optimizer tests."""

from collections.abc import Callable

import pytest
import pytest_asyncio

from menu_optimizer.config import LLMSettings
from menu_optimizer.database import InMemoryDatabase
from menu_optimizer.llm import (
    CompletionRequest,
    CompletionResponse,
    LLMClientFactory,
    LLMService,
    StaticSecretStore,
)
from menu_optimizer.shared.models import (
    AgeGroupData,
    DemographicsData,
    DiningPattern,
    GenderData,
    MenuItem,
    Restaurant,
    SimilarRestaurantData,
    SpecialtyDish,
)

RESTAURANT_ID = "rest-1"


class ScriptedLLMService(LLMService):
    """LLM service that answers from a script instead of calling a provider."""

    def __init__(self, reply: str | Callable[[CompletionRequest], str]):
        """Initialize with a fixed reply or a function of the request."""
        super().__init__(
            factory=LLMClientFactory(
                LLMSettings(provider="anthropic"), StaticSecretStore()
            )
        )
        self._reply = reply
        self.requests: list[CompletionRequest] = []
        self.providers: list[str | None] = []

    def _answer(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        text = self._reply(request) if callable(self._reply) else self._reply
        return CompletionResponse(text=text)

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Answer from the script on the default provider."""
        self.providers.append(None)
        return self._answer(request)

    async def complete_with_provider(
        self, provider: str, request: CompletionRequest, model: str | None = None
    ) -> CompletionResponse:
        """Answer from the script on a named provider."""
        self.providers.append(provider)
        return self._answer(request)


@pytest.fixture
def restaurant() -> Restaurant:
    """A mid-priced Italian restaurant."""
    return Restaurant(
        restaurant_id=RESTAURANT_ID,
        name="Trattoria Uno",
        cuisine="italian",
        location="Austin, TX",
        price_level=2,
        entity_id="entity-1",
    )


@pytest.fixture
def menu_items() -> list[MenuItem]:
    """Three active items and one inactive item."""
    return [
        MenuItem(
            item_id="item-1",
            restaurant_id=RESTAURANT_ID,
            name="Carbonara",
            description="Spaghetti with egg, pecorino and guanciale",
            price=16.0,
            category="pasta",
            ingredients=["spaghetti", "egg", "pecorino", "guanciale"],
        ),
        MenuItem(
            item_id="item-2",
            restaurant_id=RESTAURANT_ID,
            name="Margherita",
            description="Tomato, mozzarella and basil",
            price=14.0,
            category="pizza",
            dietary_tags=["vegetarian"],
        ),
        MenuItem(
            item_id="item-3",
            restaurant_id=RESTAURANT_ID,
            name="Tiramisu",
            description="Coffee-soaked ladyfingers with mascarpone",
            price=8.0,
            category="desserts",
        ),
        MenuItem(
            item_id="item-4",
            restaurant_id=RESTAURANT_ID,
            name="Old Special",
            description="No longer served",
            price=12.0,
            category="pasta",
            is_active=False,
        ),
    ]


@pytest.fixture
def demographics() -> DemographicsData:
    """Demographics snapshot of the restaurant."""
    return DemographicsData(
        restaurant_id=RESTAURANT_ID,
        age_groups=[
            AgeGroupData(
                age_range="25-34",
                percentage=40,
                preferences=["craft cocktails", "shareable plates"],
            ),
            AgeGroupData(
                age_range="35-44",
                percentage=30,
                preferences=["family meals", "shareable plates"],
            ),
        ],
        gender_data=[
            GenderData(gender="female", percentage=55, preferences=["light dishes"]),
            GenderData(gender="male", percentage=45, preferences=["hearty dishes"]),
        ],
        interests=["wine", "live music"],
        dining_patterns=[
            DiningPattern(pattern="weekday lunch", frequency=25, time_of_day=["noon"]),
            DiningPattern(
                pattern="weekend dinner",
                frequency=60,
                time_of_day=["evening", "late night"],
            ),
        ],
    )


@pytest.fixture
def specialty_dishes() -> list[SpecialtyDish]:
    """Merged peer specialty dishes."""
    return [
        SpecialtyDish(
            dish_name="Cacio e Pepe",
            tag_id="urn:tag:specialty_dish:place:cacio_e_pepe",
            restaurant_count=3,
            popularity=3,
            weight=0.8,
            total_weight=2.4,
        ),
        SpecialtyDish(
            dish_name="Burrata",
            tag_id="urn:tag:specialty_dish:place:burrata",
            restaurant_count=2,
            popularity=2,
            weight=0.9,
            total_weight=1.8,
        ),
    ]


@pytest_asyncio.fixture
async def db(
    restaurant: Restaurant,
    menu_items: list[MenuItem],
    demographics: DemographicsData,
    specialty_dishes: list[SpecialtyDish],
) -> InMemoryDatabase:
    """In-memory database holding the sample restaurant."""
    database = InMemoryDatabase()
    await database.restaurants.create(restaurant)
    for item in menu_items:
        await database.menu_items.create(item)
    await database.demographics.create(demographics)
    await database.similar_restaurants.create(
        SimilarRestaurantData(
            restaurant_id=RESTAURANT_ID,
            entity_id="entity-1",
            specialty_dishes=specialty_dishes,
        )
    )
    return database
