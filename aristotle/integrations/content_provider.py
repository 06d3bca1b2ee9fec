"""
Content providers: where session items come from.

The engine only consumes `ContentProvider.get_item`. `ItemBank` is a small
in-memory provider backed by validated records, used by the CLI and tests.
It rotates through matching items so consecutive requests don't repeat the
same question while alternatives exist.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from aristotle.core.errors import ContentUnavailable
from aristotle.core.models import DifficultyTier, Item, ItemType


class ContentProvider(Protocol):
    """Produces items for a topic at a given difficulty."""

    async def get_item(
        self,
        topic: str,
        tier: DifficultyTier,
        item_type: ItemType,
    ) -> Item:
        ...


class ItemRecord(BaseModel):
    """Item bank record as stored in JSON."""

    id: str | None = None
    text: str = Field(min_length=1)
    type: ItemType
    difficulty: DifficultyTier
    topic: str = Field(min_length=1)
    correct_answer: str | None = Field(default=None, alias="correctAnswer")
    expected_steps: list[str] = Field(default_factory=list, alias="expectedSteps")
    options: list[str] = Field(default_factory=list)
    marks: int = Field(default=1, ge=1)
    time_limit_seconds: int | None = None

    model_config = {"populate_by_name": True}

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value):
        return ItemType.parse(value)

    def to_item(self) -> Item:
        return Item(
            item_id=self.id or uuid.uuid4().hex[:12],
            prompt=self.text,
            item_type=self.type,
            tier=self.difficulty,
            topic=self.topic,
            expected_answer=self.correct_answer,
            expected_steps=tuple(self.expected_steps),
            marks=self.marks,
            options=tuple(self.options),
            time_limit_seconds=self.time_limit_seconds,
        )


class ItemBank:
    """In-memory content provider."""

    def __init__(self, items: list[Item] | None = None):
        self._items: list[Item] = list(items or [])
        self._cursor: dict[tuple[str, DifficultyTier, ItemType], int] = {}

    @classmethod
    def from_records(cls, records: list[dict]) -> ItemBank:
        """Build a bank from raw dicts; invalid records are skipped with a warning."""
        items = []
        for index, record in enumerate(records):
            try:
                items.append(ItemRecord.model_validate(record).to_item())
            except (ValidationError, ValueError) as e:
                logger.warning(f"Skipping item record #{index}: {e}")
        return cls(items)

    @classmethod
    def from_file(cls, path: Path) -> ItemBank:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        records = data.get("items", []) if isinstance(data, dict) else data
        bank = cls.from_records(records)
        logger.info(f"Loaded {len(bank)} items from {path}")
        return bank

    def __len__(self) -> int:
        return len(self._items)

    def topics(self) -> list[str]:
        return sorted({item.topic for item in self._items})

    async def get_item(
        self,
        topic: str,
        tier: DifficultyTier,
        item_type: ItemType,
    ) -> Item:
        matches = [
            item for item in self._items
            if item.topic == topic and item.tier is tier and item.item_type is item_type
        ]
        if not matches:
            raise ContentUnavailable(topic, tier.value, item_type.value, "no matching item in bank")

        key = (topic, tier, item_type)
        position = self._cursor.get(key, 0)
        self._cursor[key] = position + 1
        return matches[position % len(matches)]
