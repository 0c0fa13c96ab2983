"""Batch orchestration of optimization, suggestion, enhancement and taste analysis."""

import logging
from collections.abc import Sequence
from typing import TypeVar

from ..config import PipelineSettings
from ..database.base import DatabaseController
from ..errors import (
    DomainValidationError,
    MenuOptimizerError,
    NotFoundError,
    ResponseParseError,
    ReviewConflictError,
)
from ..llm import CompletionRequest, CompletionResponse, LLMService
from ..shared.models import (
    TERMINAL_STATUSES,
    BatchResponse,
    EnhanceDescriptionsRequest,
    EnhanceDescriptionsResponse,
    EnhancementHistoryEntry,
    ItemResult,
    MenuItem,
    MenuItemSuggestion,
    OptimizedMenuItem,
    OptimizeExistingItemsRequest,
    OptimizeExistingItemsResponse,
    Restaurant,
    SpecialtyDish,
    SuggestNewItemsRequest,
    SuggestNewItemsResponse,
    TasteProfileResponse,
    utc_now,
)
from ..taste import TasteApiClient
from ..taste.profiles import (
    TasteProfileComparison,
    TasteProfileSummary,
    compare_taste_profiles,
    summarize_taste_profile,
)
from .batching import BatchOutcome, run_in_batches
from .parsing import (
    parse_enhanced_description,
    parse_optimization_response,
    parse_suggestions_response,
)
from .prompts import (
    build_enhancement_prompt,
    build_optimization_prompt,
    build_suggestion_prompt,
)
from .signals import build_demographic_insights, prioritize_specialty_dishes

logger = logging.getLogger(__name__)

DEFAULT_OPTIMIZATION_REASON = "Enhanced based on demographic preferences"
DEFAULT_INSPIRATION = "popular specialty dishes"

TBatch = TypeVar("TBatch", bound=BatchResponse)


def _summarize(
    response: TBatch, outcomes: Sequence[BatchOutcome[MenuItem, object]]
) -> TBatch:
    """Fill the counts and per-item results of a batch response."""
    for outcome in outcomes:
        item_id = outcome.item.item_id
        if outcome.success:
            response.results.append(ItemResult(item_id=item_id, success=True))
        else:
            message = str(outcome.error)
            response.results.append(
                ItemResult(item_id=item_id, success=False, error=message)
            )
            response.errors.append(f"{outcome.item.name}: {message}")
    response.total_items_processed = len(outcomes)
    response.success_count = sum(1 for o in outcomes if o.success)
    response.failure_count = response.total_items_processed - response.success_count
    return response


class OptimizationPipeline:
    """Generates pending optimization and suggestion records for a restaurant."""

    def __init__(
        self,
        db: DatabaseController,
        llm: LLMService,
        settings: PipelineSettings | None = None,
        taste_client: TasteApiClient | None = None,
    ):
        """Initialize the pipeline.

        Args:
            db: Repositories for restaurants, menu items and candidates
            llm: Long-lived LLM service shared with other callers
            settings: Batch sizes and limits. If None, read from the environment.
            taste_client: Taste API client, needed only for taste analysis

        """
        self.db = db
        self.llm = llm
        self.settings = settings or PipelineSettings()
        self.taste_client = taste_client

    async def _get_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = await self.db.restaurants.get_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError(f"Restaurant {restaurant_id} not found")
        return restaurant

    async def _select_items(
        self, restaurant_id: str, item_ids: list[str] | None
    ) -> list[MenuItem]:
        """Active items of a restaurant, optionally limited to given ids."""
        if not item_ids:
            items = await self.db.menu_items.list_by_restaurant(restaurant_id)
            return [item for item in items if item.is_active]

        selected: list[MenuItem] = []
        for item_id in item_ids:
            item = await self.db.menu_items.get_by_id(item_id)
            if item is None:
                raise DomainValidationError(f"Menu item {item_id} not found")
            if item.restaurant_id != restaurant_id:
                raise DomainValidationError(
                    f"Menu item {item_id} does not belong to restaurant {restaurant_id}"
                )
            if item.is_active:
                selected.append(item)
        return selected

    async def _complete(
        self, request: CompletionRequest, provider: str | None = None
    ) -> CompletionResponse:
        if provider:
            return await self.llm.complete_with_provider(provider, request)
        return await self.llm.complete(request)

    async def optimize_existing_items(
        self, request: OptimizeExistingItemsRequest
    ) -> OptimizeExistingItemsResponse:
        """Create pending rewrites of existing items for selected demographics.

        A pending rewrite of an item is replaced. An item whose rewrite was
        already approved or rejected fails with ReviewConflictError and its
        record is left as it is.

        Raises:
            DomainValidationError: If neither demographics nor specialty dishes
                were selected, an item is outside the restaurant, or there is
                nothing to optimize.
            NotFoundError: If the restaurant or its demographics data is missing.

        """
        selected = request.selected_demographics
        has_demographics = selected is not None and not selected.is_empty()
        if not has_demographics and not request.selected_specialty_dishes:
            raise DomainValidationError(
                "Select at least one demographic group or specialty dish"
            )

        restaurant = await self._get_restaurant(request.restaurant_id)

        insights: list[str] = []
        if has_demographics:
            demographics = await self.db.demographics.get_by_id(
                request.restaurant_id
            )
            if demographics is None:
                raise NotFoundError(
                    f"No demographics data for restaurant {request.restaurant_id}"
                )
            insights = build_demographic_insights(demographics, selected)

        items = await self._select_items(request.restaurant_id, request.item_ids)
        if not items:
            raise DomainValidationError("No active menu items to optimize")

        dishes = list(request.selected_specialty_dishes or [])
        batch_size = request.batch_size or self.settings.optimization_batch_size
        logger.info(
            f"Optimizing {len(items)} items of {restaurant.name} "
            f"with {len(insights)} insights and {len(dishes)} dishes"
        )

        async def optimize(item: MenuItem) -> OptimizedMenuItem:
            existing = await self.db.optimized_items.get_by_id(item.item_id)
            if existing is not None and existing.status in TERMINAL_STATUSES:
                raise ReviewConflictError(item.item_id, existing.status)

            prompt = build_optimization_prompt(
                restaurant,
                item,
                insights,
                dishes,
                style=request.optimization_style,
                target_audience=request.target_audience,
            )
            reply = await self.llm.complete(
                CompletionRequest(
                    prompt=prompt.prompt,
                    system_prompt=prompt.system_prompt,
                    max_tokens=500,
                    temperature=0.7,
                )
            )
            parsed = parse_optimization_response(reply.text)
            if parsed.is_empty:
                raise ResponseParseError(
                    f"No optimization could be parsed for {item.name}"
                )

            optimized = OptimizedMenuItem(
                item_id=item.item_id,
                restaurant_id=item.restaurant_id,
                original_name=item.name,
                original_description=item.description,
                optimized_name=parsed.optimized_name or item.name,
                optimized_description=parsed.optimized_description
                or item.description,
                optimization_reason=parsed.reason or DEFAULT_OPTIMIZATION_REASON,
                demographic_insights=insights,
                selected_demographics=selected,
            )
            return await self.db.optimized_items.create(optimized)

        outcomes = await run_in_batches(
            items, batch_size, optimize, describe=lambda i: f"item {i.item_id}"
        )
        response = _summarize(OptimizeExistingItemsResponse(), outcomes)
        response.optimized_items = [o.result for o in outcomes if o.result]
        logger.info(
            f"Optimization finished: {response.success_count} succeeded, "
            f"{response.failure_count} failed"
        )
        return response

    async def suggest_new_items(
        self, request: SuggestNewItemsRequest
    ) -> SuggestNewItemsResponse:
        """Create pending new-dish suggestions inspired by peer specialty dishes.

        Raises:
            NotFoundError: If the restaurant is missing, or no specialty dishes
                were selected and none are stored for it.

        """
        restaurant = await self._get_restaurant(request.restaurant_id)
        max_suggestions = request.max_suggestions or self.settings.max_suggestions

        candidates: list[SpecialtyDish] = []
        if not request.selected_specialty_dishes:
            peer_data = await self.db.similar_restaurants.get_by_id(
                request.restaurant_id
            )
            if peer_data is None or not peer_data.specialty_dishes:
                raise NotFoundError(
                    f"No specialty dish data for restaurant {request.restaurant_id}"
                )
            candidates = peer_data.specialty_dishes

        dishes = prioritize_specialty_dishes(
            candidates, max_suggestions * 2, request.selected_specialty_dishes
        )
        existing_items = await self.db.menu_items.list_by_restaurant(
            request.restaurant_id
        )
        existing_names = [item.name for item in existing_items if item.is_active]

        prompt = build_suggestion_prompt(
            restaurant,
            dishes,
            existing_names,
            max_suggestions,
            excluded_categories=request.excluded_categories,
            cuisine_override=request.cuisine_override,
        )
        response = SuggestNewItemsResponse()
        try:
            reply = await self.llm.complete(
                CompletionRequest(
                    prompt=prompt.prompt,
                    system_prompt=prompt.system_prompt,
                    max_tokens=2000,
                    temperature=0.8,
                )
            )
        except MenuOptimizerError as e:
            logger.error(f"Suggestion generation failed for {restaurant.name}: {e}")
            response.total_items_processed = 1
            response.failure_count = 1
            response.errors.append(str(e))
            return response

        parsed = parse_suggestions_response(reply.text)[:max_suggestions]
        if not parsed:
            response.total_items_processed = 1
            response.failure_count = 1
            response.errors.append("No valid suggestions could be parsed")
            return response

        for candidate in parsed:
            suggestion = MenuItemSuggestion(
                restaurant_id=request.restaurant_id,
                name=candidate.name,
                description=candidate.description,
                estimated_price=candidate.estimated_price,
                category=candidate.category,
                suggested_ingredients=candidate.ingredients,
                dietary_tags=candidate.dietary_tags,
                inspiration_source=(
                    "Similar restaurants - "
                    f"{candidate.based_on_dish or DEFAULT_INSPIRATION}"
                ),
                based_on_specialty_dish=candidate.based_on_dish,
            )
            try:
                saved = await self.db.suggestions.create(suggestion)
            except Exception as e:
                logger.exception(f"Failed to save suggestion {suggestion.name}")
                response.results.append(
                    ItemResult(
                        item_id=suggestion.suggestion_id, success=False, error=str(e)
                    )
                )
                response.errors.append(f"{suggestion.name}: {e}")
                continue
            response.suggestions.append(saved)
            response.results.append(
                ItemResult(item_id=saved.suggestion_id, success=True)
            )

        response.total_items_processed = len(response.results)
        response.success_count = len(response.suggestions)
        response.failure_count = response.total_items_processed - response.success_count
        logger.info(
            f"Generated {response.success_count} suggestions for {restaurant.name}"
        )
        return response

    async def enhance_descriptions(
        self, request: EnhanceDescriptionsRequest
    ) -> EnhanceDescriptionsResponse:
        """Generate pending enhanced descriptions.

        Targets one item, or every active item of a restaurant, optionally
        limited to one category. Items whose enhanced description is already
        approved are reported as successes without a model call.

        Raises:
            DomainValidationError: If neither an item nor a restaurant is given.
            NotFoundError: If the requested item does not exist.

        """
        if request.item_id:
            item = await self.db.menu_items.get_by_id(request.item_id)
            if item is None:
                raise NotFoundError(f"Menu item {request.item_id} not found")
            items = [item]
        elif request.restaurant_id:
            items = await self._select_items(request.restaurant_id, None)
            if request.category:
                wanted = request.category.lower()
                items = [i for i in items if i.category.lower() == wanted]
        else:
            raise DomainValidationError("Either item_id or restaurant_id is required")

        batch_size = request.batch_size or self.settings.enhancement_batch_size

        async def enhance(item: MenuItem) -> MenuItem:
            if item.enhanced_description_status == "approved":
                logger.info(f"Skipping {item.item_id}: enhancement already approved")
                return item

            prompt = build_enhancement_prompt(
                item, style=request.style, target_audience=request.target_audience
            )
            reply = await self._complete(
                CompletionRequest(
                    prompt=prompt.prompt,
                    system_prompt=prompt.system_prompt,
                    max_tokens=200,
                    temperature=0.7,
                ),
                request.provider,
            )
            description = parse_enhanced_description(reply.text)
            if description is None:
                raise ResponseParseError(f"Empty description returned for {item.name}")

            history = [
                *item.enhancement_history,
                EnhancementHistoryEntry(
                    description=description,
                    style=request.style,
                    target_audience=request.target_audience,
                    provider=request.provider or self.llm.factory.settings.provider,
                ),
            ]
            updated = await self.db.menu_items.update(
                item.item_id,
                {
                    "enhanced_description": description,
                    "enhanced_description_status": "pending",
                    "enhancement_feedback": None,
                    "enhancement_history": history,
                    "updated_at": utc_now(),
                },
            )
            if updated is None:
                raise NotFoundError(f"Menu item {item.item_id} disappeared")
            return updated

        outcomes = await run_in_batches(
            items, batch_size, enhance, describe=lambda i: f"item {i.item_id}"
        )
        response = _summarize(EnhanceDescriptionsResponse(), outcomes)
        response.enhanced_items = [o.result for o in outcomes if o.result]
        return response

    async def analyze_taste_profiles(
        self, restaurant_id: str, item_ids: list[str] | None = None
    ) -> TasteProfileResponse:
        """Analyse items through the taste API and store their taste profiles.

        Raises:
            MenuOptimizerError: If no taste API client is configured.
            DomainValidationError: If an item is outside the restaurant.

        """
        taste_client = self.taste_client
        if taste_client is None:
            raise MenuOptimizerError("Taste analysis needs a taste API client")

        items = await self._select_items(restaurant_id, item_ids)

        async def analyze(item: MenuItem) -> MenuItem:
            profile = await taste_client.analyze_taste_profile(item)
            updated = await self.db.menu_items.update(
                item.item_id,
                {"taste_profile": profile.taste_attributes, "updated_at": utc_now()},
            )
            if updated is None:
                raise NotFoundError(f"Menu item {item.item_id} disappeared")
            return updated

        outcomes = await run_in_batches(
            items,
            self.settings.taste_profile_batch_size,
            analyze,
            describe=lambda i: f"item {i.item_id}",
        )
        response = _summarize(TasteProfileResponse(), outcomes)
        response.analyzed_items = [o.result for o in outcomes if o.result]
        return response

    async def _get_item(self, item_id: str, restaurant_id: str) -> MenuItem:
        item = await self.db.menu_items.get_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Menu item {item_id} not found")
        if item.restaurant_id != restaurant_id:
            raise DomainValidationError(
                f"Menu item {item_id} does not belong to restaurant {restaurant_id}"
            )
        return item

    async def compare_taste_profiles(
        self, restaurant_id: str, item1_id: str, item2_id: str
    ) -> TasteProfileComparison:
        """Compare the stored taste profiles of two items of a restaurant.

        Raises:
            NotFoundError: If either item does not exist.
            DomainValidationError: If an item is outside the restaurant or has
                not been analysed yet.

        """
        item1 = await self._get_item(item1_id, restaurant_id)
        item2 = await self._get_item(item2_id, restaurant_id)
        return compare_taste_profiles(item1, item2)

    async def summarize_taste_profile(
        self, restaurant_id: str, item_id: str
    ) -> TasteProfileSummary:
        """Summarize the stored taste profile of one item of a restaurant."""
        item = await self._get_item(item_id, restaurant_id)
        return summarize_taste_profile(item)
