"""Review workflow moving candidates from pending to approved or rejected.

This module is the only writer of review status. Approving an optimization
rewrites the linked menu item; approving a suggestion creates a new one.
Rejection stores the status and feedback and never touches the menu.
"""

import logging
from typing import Literal

from ..database.base import DatabaseController
from ..errors import NotFoundError, ReviewConflictError
from ..shared.models import (
    TERMINAL_STATUSES,
    MenuItem,
    MenuItemSuggestion,
    OptimizedMenuItem,
    ReviewDecision,
    ReviewResult,
    ReviewStatus,
    utc_now,
)

logger = logging.getLogger(__name__)

ReviewType = Literal["existing_items", "new_items"]

_STATUS_FOR_ACTION: dict[str, ReviewStatus] = {
    "approve": "approved",
    "reject": "rejected",
}


def _ensure_pending(record_id: str, status: ReviewStatus) -> None:
    if status in TERMINAL_STATUSES:
        raise ReviewConflictError(record_id, status)


class ReviewService:
    """Applies reviewer decisions to optimizations, suggestions and enhancements."""

    def __init__(self, db: DatabaseController):
        """Initialize with the repositories holding candidates and menu items."""
        self.db = db

    async def review_optimization(self, decision: ReviewDecision) -> ReviewResult:
        """Approve or reject one pending optimization.

        Raises:
            NotFoundError: If the optimization does not exist.
            ReviewConflictError: If it was already approved or rejected.

        """
        record = await self.db.optimized_items.get_by_id(decision.record_id)
        if record is None:
            raise NotFoundError(f"Optimized menu item {decision.record_id} not found")
        _ensure_pending(record.item_id, record.status)

        status = _STATUS_FOR_ACTION[decision.action]
        await self.db.optimized_items.update(
            record.item_id,
            {"status": status, "feedback": decision.feedback, "updated_at": utc_now()},
        )
        logger.info(f"Optimization for item {record.item_id} {status}")

        if status == "rejected":
            return ReviewResult(
                record_id=record.item_id,
                status=status,
                message="Optimized menu item rejected",
            )
        return await self._apply_optimization(record)

    async def _apply_optimization(self, record: OptimizedMenuItem) -> ReviewResult:
        item = await self.db.menu_items.get_by_id(record.item_id)
        if item is None:
            logger.warning(
                f"Approved optimization for missing menu item {record.item_id}"
            )
            return ReviewResult(
                record_id=record.item_id,
                status="approved",
                message="Optimized menu item approved but original menu item not found",
            )

        updates: dict[str, object] = {
            "name": record.optimized_name,
            "description": record.optimized_description,
            "updated_at": utc_now(),
        }
        if item.enhanced_name_status == "pending":
            updates["enhanced_name_status"] = "approved"
        if item.enhanced_description_status == "pending":
            updates["enhanced_description_status"] = "approved"

        updated = await self.db.menu_items.update(item.item_id, updates)
        return ReviewResult(
            record_id=record.item_id,
            status="approved",
            message="Optimized menu item approved and applied to the menu",
            menu_item=updated,
        )

    async def review_suggestion(self, decision: ReviewDecision) -> ReviewResult:
        """Approve or reject one pending suggestion.

        Raises:
            NotFoundError: If the suggestion does not exist.
            ReviewConflictError: If it was already approved or rejected.

        """
        record = await self.db.suggestions.get_by_id(decision.record_id)
        if record is None:
            raise NotFoundError(f"Menu item suggestion {decision.record_id} not found")
        _ensure_pending(record.suggestion_id, record.status)

        status = _STATUS_FOR_ACTION[decision.action]
        await self.db.suggestions.update(
            record.suggestion_id,
            {"status": status, "feedback": decision.feedback, "updated_at": utc_now()},
        )
        logger.info(f"Suggestion {record.suggestion_id} {status}")

        if status == "rejected":
            return ReviewResult(
                record_id=record.suggestion_id,
                status=status,
                message="Menu item suggestion rejected",
            )

        menu_item = await self.db.menu_items.create(self._to_menu_item(record))
        return ReviewResult(
            record_id=record.suggestion_id,
            status="approved",
            message="Menu item suggestion approved and added to the menu",
            menu_item=menu_item,
        )

    @staticmethod
    def _to_menu_item(suggestion: MenuItemSuggestion) -> MenuItem:
        return MenuItem(
            restaurant_id=suggestion.restaurant_id,
            name=suggestion.name,
            description=suggestion.description,
            enhanced_name=suggestion.name,
            enhanced_name_status="approved",
            enhanced_description=suggestion.description,
            enhanced_description_status="approved",
            price=suggestion.estimated_price,
            category=suggestion.category,
            ingredients=list(suggestion.suggested_ingredients),
            dietary_tags=list(suggestion.dietary_tags),
            is_active=True,
            is_ai_generated=True,
        )

    async def review(
        self, review_type: ReviewType, decision: ReviewDecision
    ) -> ReviewResult:
        """Dispatch a decision to the optimization or suggestion workflow."""
        match review_type:
            case "existing_items":
                return await self.review_optimization(decision)
            case "new_items":
                return await self.review_suggestion(decision)
            case _:
                raise ValueError(f"Unknown review type: {review_type}")

    async def review_many(
        self, review_type: ReviewType, decisions: list[ReviewDecision]
    ) -> list[ReviewResult | Exception]:
        """Apply several decisions in order.

        A failed decision is returned in place of its result and does not stop
        the others.
        """
        results: list[ReviewResult | Exception] = []
        for decision in decisions:
            try:
                results.append(await self.review(review_type, decision))
            except (NotFoundError, ReviewConflictError) as e:
                logger.warning(f"Review of {decision.record_id} failed: {e}")
                results.append(e)
        return results

    async def review_enhanced_description(
        self, decision: ReviewDecision
    ) -> ReviewResult:
        """Approve or reject the pending enhanced description of a menu item.

        Raises:
            NotFoundError: If the item is missing or has no enhanced description.
            ReviewConflictError: If the enhanced description was already reviewed.

        """
        item = await self.db.menu_items.get_by_id(decision.record_id)
        if item is None:
            raise NotFoundError(f"Menu item {decision.record_id} not found")
        if not item.enhanced_description:
            raise NotFoundError(
                f"Menu item {decision.record_id} has no enhanced description"
            )
        if item.enhanced_description_status is not None:
            _ensure_pending(item.item_id, item.enhanced_description_status)

        status = _STATUS_FOR_ACTION[decision.action]
        updated = await self.db.menu_items.update(
            item.item_id,
            {
                "enhanced_description_status": status,
                "enhancement_feedback": decision.feedback,
                "updated_at": utc_now(),
            },
        )
        return ReviewResult(
            record_id=item.item_id,
            status=status,
            message=f"Enhanced description {status}",
            menu_item=updated,
        )

    async def review_enhanced_descriptions(
        self, decisions: list[ReviewDecision]
    ) -> list[ReviewResult | Exception]:
        """Apply several enhanced-description decisions in order."""
        results: list[ReviewResult | Exception] = []
        for decision in decisions:
            try:
                results.append(await self.review_enhanced_description(decision))
            except (NotFoundError, ReviewConflictError) as e:
                logger.warning(f"Review of {decision.record_id} failed: {e}")
                results.append(e)
        return results

    async def list_optimizations(
        self, restaurant_id: str, status: ReviewStatus = "pending"
    ) -> list[OptimizedMenuItem]:
        """List optimizations of a restaurant in one status."""
        return await self.db.optimized_items.list_by_status(restaurant_id, status)

    async def list_suggestions(
        self, restaurant_id: str, status: ReviewStatus = "pending"
    ) -> list[MenuItemSuggestion]:
        """List suggestions of a restaurant in one status."""
        return await self.db.suggestions.list_by_status(restaurant_id, status)
