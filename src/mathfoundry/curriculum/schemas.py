"""Pydantic response models for curriculum and unlock endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from mathfoundry.curriculum.categories import VideoCategory


class LevelEntry(BaseModel):
    level: str
    index: int
    grade: str | None = None
    badge_color: str


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]
    electives: list[LevelEntry]
    unlock_buffer: int


class CategoryResponse(BaseModel):
    id: str
    icon: str
    label: str
    color: str
    levels: list[str]
    level_range: str
    description: str
    anchor_level: str

    @classmethod
    def from_category(cls, category: VideoCategory) -> CategoryResponse:
        return cls(
            id=category.id,
            icon=category.icon,
            label=category.label,
            color=category.color,
            levels=list(category.levels),
            level_range=category.level_range,
            description=category.description,
            anchor_level=category.anchor_level,
        )


class AllCategoriesResponse(BaseModel):
    categories: list[CategoryResponse]


class CategoryStatus(BaseModel):
    id: str
    label: str
    unlocked: bool
    almost_unlocked: bool
    unlock_requirement: str | None = None
    unlocked_levels: int
    total_levels: int


class UnlockStateResponse(BaseModel):
    child_level: str
    unlocked_levels: list[str]
    unlocked_categories: list[str]
    locked_categories: list[str]
    categories: list[CategoryStatus]


class VideoUnlockResponse(BaseModel):
    video_level: str
    child_level: str
    unlocked: bool
    almost_unlocked: bool
    levels_until_unlock: int
    unlock_requirement: str | None = None
    message: str


class UnlockDeltaResponse(BaseModel):
    old_level: str
    new_level: str
    has_new_unlocks: bool
    newly_unlocked_levels: list[str]
    newly_unlocked_categories: list[CategoryResponse]
