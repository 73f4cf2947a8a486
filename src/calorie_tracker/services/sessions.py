"""Pending meal session: the editable item set before a meal is logged."""

import dataclasses
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from calorie_tracker.domain.meals import (
    FollowUpQuestion,
    FoodItem,
    MealItemSnapshot,
    MealRecord,
    MealType,
)
from calorie_tracker.domain.nutrition import (
    EMPTY_RANGE,
    EMPTY_TOTALS,
    CalorieRange,
    Totals,
)
from calorie_tracker.domain.vision import ScanResult
from calorie_tracker.errors import (
    EmptySelectionError,
    SessionLockedError,
    ValidationError,
)
from calorie_tracker.services.calculator import (
    aggregate_totals,
    included_items,
    scale_nutrition,
)
from calorie_tracker.services.estimates import (
    estimate_calorie_range,
    score_confidence,
)
from calorie_tracker.services.ingestion import IngestionResult, IngestionService
from calorie_tracker.services.meals import MealLogService
from calorie_tracker.services.portions import MAX_ITEM_GRAMS, is_valid_grams
from calorie_tracker.services.questions import questions_for, validate_answer
from calorie_tracker.services.suggestions import suggest_edits

_logger = logging.getLogger(__name__)

BREAKFAST_START_HOUR = 5
LUNCH_START_HOUR = 11
SNACK_START_HOUR = 15
DINNER_START_HOUR = 18


class SessionState(StrEnum):
    """Lifecycle states of a pending meal."""

    EMPTY = "empty"
    EDITING = "editing"
    READY_TO_LOG = "ready_to_log"
    LOGGING = "logging"
    COMMITTED = "committed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class SessionView:
    """Read-only derived state of a session after its last mutation."""

    state: SessionState
    items: tuple[FoodItem, ...]
    answers: tuple[tuple[str, str], ...]
    meal_type: MealType
    totals: Totals
    calorie_range: CalorieRange
    confidence: float
    questions: tuple[FollowUpQuestion, ...]
    suggested_edits: tuple[str, ...]
    included_count: int

    @property
    def can_log(self) -> bool:
        return self.state == SessionState.READY_TO_LOG


def suggest_meal_type(now: datetime) -> MealType:
    """Pick a default meal type from the local time of day."""
    hour = now.hour
    if BREAKFAST_START_HOUR <= hour < LUNCH_START_HOUR:
        return MealType.BREAKFAST
    if LUNCH_START_HOUR <= hour < SNACK_START_HOUR:
        return MealType.LUNCH
    if SNACK_START_HOUR <= hour < DINNER_START_HOUR:
        return MealType.SNACK
    return MealType.DINNER


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class PendingMealSession:
    """Owns the items and answers of one meal being confirmed.

    Every mutator validates its input, applies the change and re-derives
    totals, range, confidence and questions before returning the new view.
    A rejected edit leaves the session untouched. The session is meant for a
    single writer; nothing here guards against concurrent callers beyond
    refusing edits while a commit is in flight.
    """

    meal_log_service: MealLogService
    clock: Callable[[], datetime] = _local_now
    meal_type: MealType = field(init=False)
    photo_ref: str | None = None
    photo_quality_score: float | None = None
    _items: list[FoodItem] = field(init=False, default_factory=list)
    _answers: dict[str, str] = field(init=False, default_factory=dict)
    _view: SessionView = field(init=False)
    _logging: bool = field(init=False, default=False)
    _outcome: SessionState | None = field(init=False, default=None)
    _record_id: UUID | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.meal_type = suggest_meal_type(self.clock())
        self._view = self._recompute()

    @property
    def view(self) -> SessionView:
        """Derived state as of the last mutation."""
        return self._view

    @property
    def state(self) -> SessionState:
        return self._view.state

    def get_item(self, item_id: str) -> FoodItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add_item(self, item: FoodItem) -> SessionView:
        """Append an item."""
        return self.add_items([item])

    def add_items(self, items: Iterable[FoodItem]) -> SessionView:
        """Append several items with a single recompute."""
        self._ensure_editable()
        new_items = list(items)
        known_ids = {item.id for item in self._items}
        for item in new_items:
            if item.id in known_ids:
                raise ValidationError(f"Item {item.id} is already in the meal")
            if not is_valid_grams(item.grams):
                raise ValidationError(_grams_message(item.grams))
            known_ids.add(item.id)
        self._items.extend(_with_calculated_nutrition(item) for item in new_items)
        return self._commit_edit()

    def remove_item(self, item_id: str) -> SessionView:
        """Remove an item; unknown ids are ignored."""
        self._ensure_editable()
        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            return self._view
        self._items = remaining
        return self._commit_edit()

    def toggle_include(self, item_id: str) -> SessionView:
        """Flip whether an item counts towards the meal."""
        self._ensure_editable()
        index = self._index_of(item_id)
        item = self._items[index]
        self._items[index] = dataclasses.replace(item, included=not item.included)
        return self._commit_edit()

    def set_grams(self, item_id: str, grams: float) -> SessionView:
        """Change an item's weight and rescale its nutrition."""
        self._ensure_editable()
        if not is_valid_grams(grams):
            raise ValidationError(_grams_message(grams))
        index = self._index_of(item_id)
        item = self._items[index]
        self._items[index] = dataclasses.replace(
            item,
            grams=grams,
            calculated_nutrition=scale_nutrition(item.nutrition, grams),
        )
        return self._commit_edit()

    def set_answer(self, key: str, option: str) -> SessionView:
        """Record the answer to a follow-up question."""
        self._ensure_editable()
        validate_answer(key, option)
        self._answers[key] = option
        return self._commit_edit()

    def set_meal_type(self, meal_type: MealType | str) -> SessionView:
        """Classify the meal; nutrition is unaffected."""
        self._ensure_editable()
        try:
            resolved = MealType(meal_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown meal type: {meal_type}") from exc
        self.meal_type = resolved
        return self._commit_edit()

    def attach_photo(self, photo_ref: str | None, quality_score: float | None) -> None:
        """Remember the scanned photo for the record and suggestions."""
        self._ensure_editable()
        self.photo_ref = photo_ref
        self.photo_quality_score = quality_score
        self._commit_edit()

    def build_record(self) -> MealRecord:
        """Snapshot the included items into a meal record.

        The record id stays the same until the session is edited, so a
        retried commit resubmits the same meal.
        """
        included = included_items(self._items)
        if not included:
            raise EmptySelectionError
        if self._record_id is None:
            self._record_id = uuid4()
        view = self._view
        return MealRecord(
            id=self._record_id,
            meal_type=self.meal_type,
            eaten_at=self.clock(),
            items=tuple(_snapshot(item) for item in included),
            totals=view.totals,
            calorie_range=view.calorie_range,
            confidence=view.confidence,
            photo_ref=self.photo_ref,
        )

    async def commit(self) -> UUID:
        """Log the meal and clear the session.

        On PersistenceFailure the session keeps every edit so the commit can
        simply be retried. A discard while the save is in flight wins: the
        session ends discarded, though the save itself is not recalled.
        """
        self._ensure_editable()
        record = self.build_record()
        self._logging = True
        self._view = dataclasses.replace(self._view, state=SessionState.LOGGING)
        try:
            meal_id = await self.meal_log_service.save(record)
        finally:
            self._logging = False
            self._view = self._recompute()
        if self._outcome == SessionState.DISCARDED:
            _logger.info("Meal %s was stored after the session was discarded", meal_id)
            return meal_id
        self._reset(SessionState.COMMITTED)
        return meal_id

    def discard(self) -> SessionView:
        """Drop all items and answers.

        Always succeeds, also while a commit is in flight; edits stay locked
        until that save returns.
        """
        self._reset(SessionState.DISCARDED)
        _logger.debug("Pending meal discarded")
        return self._view

    def recompute(self) -> SessionView:
        """Re-derive the view from the current items and answers."""
        self._view = self._recompute()
        return self._view

    def _recompute(self) -> SessionView:
        items = tuple(self._items)
        included = included_items(items)
        if included:
            totals = aggregate_totals(included)
            calorie_range = estimate_calorie_range(
                included, self._answers, totals.calories
            )
        else:
            totals = EMPTY_TOTALS
            calorie_range = EMPTY_RANGE
        return SessionView(
            state=self._derive_state(items, included),
            items=items,
            answers=tuple(sorted(self._answers.items())),
            meal_type=self.meal_type,
            totals=totals,
            calorie_range=calorie_range,
            confidence=score_confidence(included),
            questions=tuple(questions_for(included, self._answers)),
            suggested_edits=tuple(suggest_edits(included, self.photo_quality_score)),
            included_count=len(included),
        )

    def _derive_state(
        self, items: tuple[FoodItem, ...], included: list[FoodItem]
    ) -> SessionState:
        if not items and self._outcome is not None:
            return self._outcome
        if self._logging:
            return SessionState.LOGGING
        if not items:
            return SessionState.EMPTY
        if included:
            return SessionState.READY_TO_LOG
        return SessionState.EDITING

    def _commit_edit(self) -> SessionView:
        self._outcome = None
        self._record_id = None
        self._view = self._recompute()
        return self._view

    def _reset(self, outcome: SessionState) -> None:
        self._items = []
        self._answers = {}
        self._record_id = None
        self.photo_ref = None
        self.photo_quality_score = None
        self.meal_type = suggest_meal_type(self.clock())
        self._outcome = outcome
        self._view = self._recompute()

    def _ensure_editable(self) -> None:
        if self._logging:
            raise SessionLockedError

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise ValidationError(f"No item with id {item_id}")


def _with_calculated_nutrition(item: FoodItem) -> FoodItem:
    return dataclasses.replace(
        item, calculated_nutrition=scale_nutrition(item.nutrition, item.grams)
    )


def _grams_message(grams: float) -> str:
    return f"Grams must be between 0 and {MAX_ITEM_GRAMS} (got {grams})"


def _snapshot(item: FoodItem) -> MealItemSnapshot:
    return MealItemSnapshot(
        name=item.name,
        grams=item.grams,
        nutrition=item.calculated_nutrition,
        confidence=item.confidence,
        source=item.source,
        quantity=item.portion.quantity if item.portion else None,
        unit=item.portion.unit.value if item.portion else None,
    )


@dataclass
class SessionService:
    """Creates pending meal sessions bound to the configured collaborators."""

    meal_log_service: MealLogService
    ingestion_service: IngestionService
    clock: Callable[[], datetime] = _local_now

    def start_session(self) -> PendingMealSession:
        """Create an empty session, e.g. for manual entry."""
        return PendingMealSession(
            meal_log_service=self.meal_log_service, clock=self.clock
        )

    async def start_from_scan(
        self, scan: ScanResult
    ) -> tuple[PendingMealSession, IngestionResult]:
        """Create a session pre-filled with the items of a scan."""
        result = await self.ingestion_service.ingest_scan(scan)
        session = self.start_session()
        session.attach_photo(result.photo_ref, result.photo_quality.score)
        session.add_items(result.items)
        _logger.info(
            "Started session from scan: %s items, %s without nutrition",
            len(result.items),
            len(result.warnings),
        )
        return session, result
