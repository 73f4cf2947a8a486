"""Error types raised by the meal estimation engine."""


class CalorieTrackerError(Exception):
    """Base class for engine errors."""


class ValidationError(CalorieTrackerError):
    """Raised when an edit carries an out-of-range or unknown value."""


class EmptySelectionError(CalorieTrackerError):
    """Raised when a meal is committed without any included items."""

    def __init__(self) -> None:
        super().__init__("Add at least one item before logging the meal.")


class MissingNutritionDataError(CalorieTrackerError):
    """Recorded when an item has no usable per-100g nutrition."""

    def __init__(self, item_name: str) -> None:
        self.item_name = item_name
        super().__init__(f"No nutrition data found for '{item_name}'")


class PersistenceFailure(CalorieTrackerError):
    """Raised when the meal record could not be saved."""


class SessionLockedError(CalorieTrackerError):
    """Raised when a session is edited while a commit is in flight."""

    def __init__(self) -> None:
        super().__init__("Session is being logged and cannot be edited.")
