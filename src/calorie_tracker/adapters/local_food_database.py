"""In-memory food database loaded from a JSON seed file."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from calorie_tracker.domain.library import CommonPortion, FoodDatabaseEntry, FoodMatch
from calorie_tracker.domain.nutrition import FoodCategory
from calorie_tracker.domain.vision import DetectedNutrition
from calorie_tracker.services.lookup import MIN_RELEVANCE, FoodDatabase, name_similarity

_logger = logging.getLogger(__name__)


class _SeedPortion(BaseModel):
    name: str
    grams: float = Field(gt=0)


class _SeedFood(BaseModel):
    id: str
    name: str
    aliases: list[str] = Field(default_factory=list)
    category: FoodCategory | None = None
    per_100g: DetectedNutrition
    common_portions: list[_SeedPortion] = Field(default_factory=list)

    def to_entry(self) -> FoodDatabaseEntry:
        return FoodDatabaseEntry(
            id=self.id,
            name=self.name,
            per_100g=self.per_100g.to_domain(),
            category=self.category,
            aliases=tuple(self.aliases),
            common_portions=tuple(
                CommonPortion(name=portion.name, grams=portion.grams)
                for portion in self.common_portions
            ),
        )


class _SeedFile(BaseModel):
    foods: list[_SeedFood]


@dataclass
class LocalFoodDatabase(FoodDatabase):
    """Fuzzy name search over a fixed list of foods."""

    entries: list[FoodDatabaseEntry]

    @classmethod
    def from_json(cls, path: str | Path) -> "LocalFoodDatabase":
        """Load foods from a ``{"foods": [...]}`` seed file."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        seed = _SeedFile.model_validate(raw)
        entries = [food.to_entry() for food in seed.foods]
        _logger.info("Loaded %s foods from %s", len(entries), path)
        return cls(entries=entries)

    async def search(self, query: str, limit: int) -> list[FoodMatch]:
        matches = []
        for entry in self.entries:
            score = max(
                [name_similarity(entry.name, query)]
                + [name_similarity(alias, query) for alias in entry.aliases]
            )
            if score > MIN_RELEVANCE:
                matches.append(FoodMatch(entry=entry, relevance=score))
        matches.sort(key=lambda match: match.relevance, reverse=True)
        return matches[:limit]

    def get(self, entry_id: str) -> FoodDatabaseEntry | None:
        """Return an entry by exact id."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def by_category(self, category: FoodCategory) -> list[FoodDatabaseEntry]:
        return [entry for entry in self.entries if entry.category == category]
