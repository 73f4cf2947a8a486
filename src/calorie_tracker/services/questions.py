"""Follow-up questions that narrow the calorie range."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from calorie_tracker.domain.meals import FollowUpQuestion, FoodItem
from calorie_tracker.domain.nutrition import RiskFlag
from calorie_tracker.errors import ValidationError
from calorie_tracker.services.calculator import included_items


@dataclass(frozen=True)
class QuestionTemplate:
    """A question and the flags that make it relevant."""

    key: str
    question: str
    options: tuple[str, ...]
    trigger_flags: frozenset[RiskFlag]


OIL_QUESTION = QuestionTemplate(
    key="oil_used",
    question="Was oil or butter used in cooking?",
    options=("none", "a little", "normal", "a lot"),
    trigger_flags=frozenset({RiskFlag.POSSIBLE_OIL, RiskFlag.FRIED}),
)
SAUCE_QUESTION = QuestionTemplate(
    key="sauce_amount",
    question="How much sauce or dressing was there?",
    options=("none", "light", "normal", "heavy"),
    trigger_flags=frozenset(
        {RiskFlag.POSSIBLE_SAUCE, RiskFlag.POSSIBLE_DRESSING, RiskFlag.CREAMY}
    ),
)

# Display order.
QUESTION_CATALOG: tuple[QuestionTemplate, ...] = (OIL_QUESTION, SAUCE_QUESTION)


def questions_for(
    items: Iterable[FoodItem], answers: Mapping[str, str] | None = None
) -> list[FollowUpQuestion]:
    """Return the questions relevant to the included items."""
    present: set[RiskFlag] = set()
    for item in included_items(items):
        present.update(item.flags)
    answers = answers or {}
    return [
        FollowUpQuestion(
            key=template.key,
            question=template.question,
            options=template.options,
            selected_option=answers.get(template.key),
        )
        for template in QUESTION_CATALOG
        if template.trigger_flags & present
    ]


def validate_answer(key: str, option: str) -> None:
    """Raise ValidationError unless ``option`` is declared for question ``key``."""
    for template in QUESTION_CATALOG:
        if template.key == key:
            if option not in template.options:
                allowed = ", ".join(template.options)
                raise ValidationError(
                    f"'{option}' is not a valid answer for {key} (expected {allowed})"
                )
            return
    raise ValidationError(f"Unknown question: {key}")
