"""Data models shared by the optimization pipeline, review workflow and scoring."""

from datetime import UTC, datetime
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

ReviewStatus = Literal["pending", "approved", "rejected"]
TERMINAL_STATUSES: frozenset[str] = frozenset({"approved", "rejected"})


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_id() -> str:
    """Generate a new record id."""
    return str(uuid4())


class EnhancementHistoryEntry(BaseModel):
    """One generated enhanced description of a menu item."""

    description: str = Field(description="The generated description")
    style: str | None = Field(default=None, description="Writing style requested")
    target_audience: str | None = Field(default=None, description="Target audience")
    provider: str | None = Field(default=None, description="Model provider used")
    created_at: datetime = Field(default_factory=utc_now)


class MenuItem(BaseModel):
    """A dish on a restaurant's live menu."""

    item_id: str = Field(default_factory=new_id, description="Stable item key")
    restaurant_id: str = Field(description="Owning restaurant")
    name: str
    description: str = ""
    enhanced_name: str | None = None
    enhanced_name_status: ReviewStatus | None = None
    enhanced_description: str | None = None
    enhanced_description_status: ReviewStatus | None = None
    enhancement_feedback: str | None = None
    enhancement_history: list[EnhancementHistoryEntry] = Field(default_factory=list)
    price: float = Field(ge=0, description="Price in currency units")
    category: str = ""
    ingredients: list[str] = Field(default_factory=list)
    dietary_tags: list[str] = Field(default_factory=list)
    llm_generated_tags: list[str] = Field(
        default_factory=list, description="Tags produced by a model"
    )
    taste_profile: dict[str, float] | None = Field(
        default=None, description="Attribute to [0, 1] score map"
    )
    is_active: bool = True
    is_ai_generated: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def has_approved_enhancement(self) -> bool:
        """Whether an approved enhanced description exists."""
        return (
            bool(self.enhanced_description)
            and self.enhanced_description_status == "approved"
        )


class Restaurant(BaseModel):
    """A restaurant profile."""

    restaurant_id: str = Field(default_factory=new_id)
    name: str
    cuisine: str | None = None
    location: str | None = None
    price_level: int | None = Field(
        default=None, ge=1, le=4, description="Price level from 1 (cheap) to 4"
    )
    rating: float | None = None
    entity_id: str | None = Field(
        default=None, description="Identifier of the restaurant in the taste API"
    )


class AgeGroupData(BaseModel):
    """Share of customers in one age bracket."""

    age_range: str
    percentage: float
    preferences: list[str] = Field(default_factory=list)


class GenderData(BaseModel):
    """Share of customers of one gender."""

    gender: str
    percentage: float
    preferences: list[str] = Field(default_factory=list)


class DiningPattern(BaseModel):
    """A recurring dining behaviour."""

    pattern: str
    frequency: float
    time_of_day: list[str] = Field(default_factory=list)


class DemographicsData(BaseModel):
    """Customer demographics snapshot of a restaurant."""

    restaurant_id: str
    age_groups: list[AgeGroupData] = Field(default_factory=list)
    gender_data: list[GenderData] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    dining_patterns: list[DiningPattern] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utc_now)


class SpecialtyDish(BaseModel):
    """A dish tag commonly offered by peer restaurants."""

    dish_name: str
    tag_id: str
    restaurant_count: int = Field(default=1, ge=1)
    popularity: float = 0.0
    weight: float = 1.0
    total_weight: float = 1.0


class SimilarRestaurant(BaseModel):
    """A peer restaurant returned by the taste API."""

    name: str
    entity_id: str
    address: str | None = None
    price_level: int | None = None
    business_rating: float | None = None
    popularity: float | None = None
    specialty_dishes: list[SpecialtyDish] = Field(default_factory=list)


class SimilarRestaurantData(BaseModel):
    """Peer restaurants of a restaurant and the specialty dishes merged across them."""

    restaurant_id: str
    entity_id: str | None = None
    similar_restaurants: list[SimilarRestaurant] = Field(default_factory=list)
    specialty_dishes: list[SpecialtyDish] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utc_now)


class OptimizedMenuItem(BaseModel):
    """A pending rewrite of an existing menu item's name and description."""

    item_id: str = Field(description="Menu item this candidate revises")
    restaurant_id: str
    original_name: str
    original_description: str
    optimized_name: str
    optimized_description: str
    optimization_reason: str
    demographic_insights: list[str] = Field(default_factory=list)
    selected_demographics: "SelectedDemographics | None" = None
    status: ReviewStatus = "pending"
    feedback: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class MenuItemSuggestion(BaseModel):
    """A proposed brand-new dish."""

    suggestion_id: str = Field(default_factory=new_id)
    restaurant_id: str
    name: str
    description: str
    estimated_price: float = Field(ge=0)
    category: str
    suggested_ingredients: list[str] = Field(default_factory=list)
    dietary_tags: list[str] = Field(default_factory=list)
    inspiration_source: str
    based_on_specialty_dish: str | None = None
    status: ReviewStatus = "pending"
    feedback: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class AnalyticsMetrics(BaseModel):
    """Heuristic scores of a menu item, each in [0, 100]."""

    popularity_score: float = Field(ge=0, le=100)
    profitability_score: float = Field(ge=0, le=100)
    recommendation_score: float = Field(ge=0, le=100)


class TrendPoint(BaseModel):
    """A composite score recorded at a point in time."""

    timestamp: datetime = Field(default_factory=utc_now)
    score: float


class MenuItemAnalytics(BaseModel):
    """Persisted analytics record of one menu item."""

    item_id: str
    restaurant_id: str
    metrics: AnalyticsMetrics
    trends: list[TrendPoint] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utc_now)


# Caller-facing request and response shapes


class SelectedDemographics(BaseModel):
    """Demographic segments chosen by the caller."""

    selected_age_groups: list[str] = Field(default_factory=list)
    selected_gender_groups: list[str] = Field(default_factory=list)
    selected_interests: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """Whether no segment at all was selected."""
        return not (
            self.selected_age_groups
            or self.selected_gender_groups
            or self.selected_interests
        )


class OptimizeExistingItemsRequest(BaseModel):
    """Request to rewrite existing menu items for selected demographics."""

    restaurant_id: str
    item_ids: list[str] | None = None
    selected_demographics: SelectedDemographics | None = None
    selected_specialty_dishes: list[SpecialtyDish] | None = None
    optimization_style: str | None = None
    target_audience: str | None = None
    batch_size: int | None = Field(default=None, ge=1)


class SuggestNewItemsRequest(BaseModel):
    """Request to propose new dishes inspired by peer specialty dishes."""

    restaurant_id: str
    selected_specialty_dishes: list[SpecialtyDish] | None = None
    max_suggestions: int | None = Field(default=None, ge=1)
    excluded_categories: list[str] = Field(default_factory=list)
    cuisine_override: str | None = None


class EnhanceDescriptionsRequest(BaseModel):
    """Request to generate enhanced descriptions."""

    restaurant_id: str | None = None
    item_id: str | None = None
    category: str | None = None
    style: str | None = None
    target_audience: str | None = None
    provider: str | None = None
    batch_size: int | None = Field(default=None, ge=1)


class ItemResult(BaseModel):
    """Outcome of processing one item within a batch."""

    item_id: str
    success: bool
    error: str | None = None


class BatchResponse(BaseModel):
    """Counts and per-item outcomes of a batch run."""

    total_items_processed: int = 0
    success_count: int = 0
    failure_count: int = 0
    results: list[ItemResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class OptimizeExistingItemsResponse(BatchResponse):
    """Outcome of an optimization run."""

    optimized_items: list[OptimizedMenuItem] = Field(default_factory=list)


class SuggestNewItemsResponse(BatchResponse):
    """Outcome of a suggestion run."""

    suggestions: list[MenuItemSuggestion] = Field(default_factory=list)


class EnhanceDescriptionsResponse(BatchResponse):
    """Outcome of a description enhancement run."""

    enhanced_items: list[MenuItem] = Field(default_factory=list)


class TasteProfileResponse(BatchResponse):
    """Outcome of a taste-profile analysis run."""

    analyzed_items: list[MenuItem] = Field(default_factory=list)


class ReviewDecision(BaseModel):
    """A reviewer's decision on one pending record."""

    record_id: str
    action: Literal["approve", "reject"]
    feedback: str | None = None


class ReviewResult(BaseModel):
    """Outcome of one review decision."""

    record_id: str
    status: ReviewStatus
    message: str
    menu_item: MenuItem | None = None


class OptimizationOption(BaseModel):
    """One optimization workflow and whether it can currently run."""

    id: Literal["optimize-existing", "suggest-new-items"]
    title: str
    description: str
    available: bool
    requirements: list[str] = Field(default_factory=list)
    unavailable_reason: str | None = None


class OptimizationReadiness(BaseModel):
    """Data availability of a restaurant for the optimization workflows."""

    has_menu_items: bool
    has_demographics_data: bool
    has_similar_restaurant_data: bool
    menu_item_count: int
    specialty_dish_count: int


class OptimizationOptionsResponse(BaseModel):
    """Readiness and options of a restaurant."""

    restaurant_id: str
    readiness: OptimizationReadiness
    options: list[OptimizationOption]


OptimizedMenuItem.model_rebuild()
