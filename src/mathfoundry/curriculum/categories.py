"""Video library categories.

Each category maps to the Kumon levels whose videos it groups:

- 7A-5A: counting and number recognition
- 4A: writing numbers (no category, not a math operation)
- 3A-2A: first addition
- A: first subtraction
- B: first 2-digit operations
- C-D: multiplication, division, long division
- D-E: fractions
- F-H: equations and pre-algebra
- I-J: algebra
- K-L: trigonometry, logarithms
- M-N: advanced functions
- O: calculus
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mathfoundry.curriculum.levels import level_index


@dataclass(frozen=True)
class VideoCategory:
    """Static category configuration.

    ``anchor_level`` is the lowest main-progression level in ``levels`` and is
    the level that gates the category as a whole.
    """

    id: str
    icon: str
    label: str
    color: str
    levels: tuple[str, ...]
    level_range: str
    description: str
    anchor_level: str = field(init=False)

    def __post_init__(self) -> None:
        if not self.levels:
            msg = f"Category {self.id!r} must span at least one level"
            raise ValueError(msg)
        ranked = [level for level in self.levels if level_index(level) >= 0]
        anchor = min(ranked, key=level_index) if ranked else self.levels[0]
        object.__setattr__(self, "anchor_level", anchor)


VIDEO_CATEGORIES: tuple[VideoCategory, ...] = (
    VideoCategory(
        id="counting",
        icon="\U0001f522",
        label="Counting",
        color="#3B82F6",
        levels=("7A", "6A", "5A"),
        level_range="7A-5A",
        description="Learn to count numbers!",
    ),
    VideoCategory(
        id="addition",
        icon="➕",
        label="Adding",
        color="#22C55E",
        levels=("3A", "2A", "A", "B"),
        level_range="3A-B",
        description="Put numbers together!",
    ),
    VideoCategory(
        id="subtraction",
        icon="➖",
        label="Taking Away",
        color="#F97316",
        levels=("A", "B"),
        level_range="A-B",
        description="Take numbers away!",
    ),
    VideoCategory(
        id="multiplication",
        icon="✖️",
        label="Times Tables",
        color="#A855F7",
        levels=("C",),
        level_range="C",
        description="Multiply numbers together!",
    ),
    VideoCategory(
        id="division",
        icon="➗",
        label="Dividing",
        color="#EC4899",
        levels=("C", "D"),
        level_range="C-D",
        description="Share numbers equally!",
    ),
    VideoCategory(
        id="fractions",
        icon="\U0001f967",
        label="Fractions",
        color="#14B8A6",
        levels=("D", "E"),
        level_range="D-E",
        description="Learn about parts of a whole!",
    ),
    VideoCategory(
        id="equations",
        icon="⚖️",
        label="Solving Puzzles",
        color="#EF4444",
        levels=("F", "G", "H"),
        level_range="F-H",
        description="Find the missing numbers!",
    ),
    VideoCategory(
        id="algebra",
        icon="\U0001f524",
        label="Letters & Numbers",
        color="#6366F1",
        levels=("I", "J"),
        level_range="I-J",
        description="Use letters in math!",
    ),
    VideoCategory(
        id="trigonometry",
        icon="\U0001f4d0",
        label="Triangles & Angles",
        color="#0EA5E9",
        levels=("K", "L"),
        level_range="K-L",
        description="Explore triangles and waves!",
    ),
    VideoCategory(
        id="precalculus",
        icon="\U0001f4c8",
        label="Advanced Functions",
        color="#8B5CF6",
        levels=("M", "N"),
        level_range="M-N",
        description="Master complex patterns!",
    ),
    VideoCategory(
        id="calculus",
        icon="∫",
        label="Calculus",
        color="#DC2626",
        levels=("O",),
        level_range="O",
        description="Discover rates of change!",
    ),
)

_BY_ID: dict[str, VideoCategory] = {c.id: c for c in VIDEO_CATEGORIES}


def get_category_by_id(category_id: str) -> VideoCategory | None:
    return _BY_ID.get(category_id)


def categories_for_level(level: str) -> list[VideoCategory]:
    """All categories that include videos for ``level``."""
    return [c for c in VIDEO_CATEGORIES if level in c.levels]


def category_unlock_level(category_id: str) -> str | None:
    """Anchor level of a category, or None for an unknown id."""
    category = get_category_by_id(category_id)
    if category is None:
        return None
    return category.anchor_level
