"""Unlock policy tests — levels, videos, categories and the parent view."""

import pytest

from mathfoundry.curriculum.categories import VIDEO_CATEGORIES, VideoCategory, get_category_by_id
from mathfoundry.curriculum.levels import ELECTIVE_LEVELS, LEVEL_ORDER
from mathfoundry.curriculum.unlock import (
    NOT_IN_PROGRESSION,
    category_unlock_requirement,
    category_unlock_stats,
    highest_child_level,
    is_almost_unlocked,
    is_category_almost_unlocked,
    is_category_unlocked,
    is_level_unlocked,
    is_video_unlocked,
    levels_until_unlock,
    locked_categories,
    unlock_message,
    unlock_requirement,
    unlocked_categories,
    unlocked_levels,
)


def _category(levels: tuple[str, ...], id: str = "test") -> VideoCategory:
    return VideoCategory(
        id=id,
        icon="?",
        label=id.title(),
        color="#000000",
        levels=levels,
        level_range="-".join(levels),
        description="",
    )


class TestUnlockedLevels:
    def test_child_at_4a(self):
        assert unlocked_levels("4A") == ["7A", "6A", "5A", "4A", "3A"]

    def test_first_level(self):
        assert unlocked_levels("7A") == ["7A", "6A"]

    def test_clipped_at_end_of_table(self):
        assert unlocked_levels("O") == list(LEVEL_ORDER)
        assert unlocked_levels("N") == list(LEVEL_ORDER)

    def test_zero_buffer(self):
        assert unlocked_levels("4A", buffer=0) == ["7A", "6A", "5A", "4A"]

    def test_wider_buffer(self):
        assert unlocked_levels("4A", buffer=3) == ["7A", "6A", "5A", "4A", "3A", "2A", "A"]

    @pytest.mark.parametrize("level", ["7A", "4A", "O", "XV"])
    def test_negative_buffer_rejected(self, level):
        with pytest.raises(ValueError, match="buffer"):
            unlocked_levels(level, buffer=-3)

    @pytest.mark.parametrize("level", ELECTIVE_LEVELS)
    def test_electives_unlock_only_themselves(self, level):
        assert unlocked_levels(level) == [level]

    def test_unknown_level_unlocks_only_itself(self):
        assert unlocked_levels("Z") == ["Z"]

    @pytest.mark.parametrize("level", LEVEL_ORDER)
    def test_own_level_always_unlocked(self, level):
        assert is_level_unlocked(level, level)

    def test_monotonic(self):
        for i, lower in enumerate(LEVEL_ORDER):
            for higher in LEVEL_ORDER[i + 1:]:
                assert set(unlocked_levels(lower)) <= set(unlocked_levels(higher))

    @pytest.mark.parametrize("level", LEVEL_ORDER)
    def test_unlocked_set_is_a_prefix(self, level):
        unlocked = unlocked_levels(level)
        assert unlocked == list(LEVEL_ORDER[: len(unlocked)])


class TestVideoUnlock:
    def test_video_alias(self):
        assert is_video_unlocked("3A", "4A")
        assert not is_video_unlocked("2A", "4A")

    def test_negative_buffer_rejected_through_callers(self):
        with pytest.raises(ValueError):
            is_video_unlocked("M", "7A", buffer=-3)
        with pytest.raises(ValueError):
            unlock_requirement("M", "7A", buffer=-1)

    def test_requirement_none_when_unlocked(self):
        assert unlock_requirement("3A", "4A") is None

    def test_requirement_is_one_below_target(self):
        assert unlock_requirement("C", "4A") == "B"

    def test_requirement_clamped_at_first_level(self):
        # Electives have no position, so the first level is reported
        assert unlock_requirement("XV", "7A", buffer=1) == "7A"

    def test_almost_unlocked_example(self):
        assert is_almost_unlocked("2A", "4A")

    def test_not_almost_when_two_away(self):
        assert not is_almost_unlocked("A", "4A")

    def test_not_almost_when_unlocked(self):
        assert not is_almost_unlocked("3A", "4A")

    def test_not_almost_for_electives(self):
        assert not is_almost_unlocked("XV", "4A")
        assert not is_almost_unlocked("A", "XS")

    def test_levels_until_unlock(self):
        assert levels_until_unlock("3A", "4A") == 0
        assert levels_until_unlock("2A", "4A") == 1
        assert levels_until_unlock("O", "7A") == 19

    def test_levels_until_unlock_sentinel(self):
        assert levels_until_unlock("XV", "4A") == NOT_IN_PROGRESSION
        assert levels_until_unlock("A", "XM") == NOT_IN_PROGRESSION
        assert levels_until_unlock("Z", "4A") == 999

    def test_elective_child_can_see_own_level(self):
        assert levels_until_unlock("XV", "XV") == 0

    def test_almost_matches_distance_of_one(self):
        for child in LEVEL_ORDER:
            for target in LEVEL_ORDER:
                distance = levels_until_unlock(target, child)
                assert is_almost_unlocked(target, child) == (distance == 1)
                if is_level_unlocked(target, child):
                    assert not is_almost_unlocked(target, child)
                    assert distance == 0

    def test_messages(self):
        assert unlock_message("3A", "4A") == "This video is unlocked!"
        assert unlock_message("2A", "4A") == "Almost there! Reach Level 3A to unlock!"
        assert unlock_message("C", "4A") == "Keep practicing to reach Level B and unlock it!"


class TestHighestChildLevel:
    def test_picks_most_advanced(self):
        assert highest_child_level(["4A", "C", "2A"]) == "C"

    def test_empty_defaults_to_lowest(self):
        assert highest_child_level([]) == "7A"

    def test_electives_never_win(self):
        assert highest_child_level(["XV", "5A"]) == "5A"
        assert highest_child_level(["XS"]) == "7A"

    def test_unknown_levels_ignored(self):
        assert highest_child_level(["Z", "A"]) == "A"

    def test_accepts_generators(self):
        assert highest_child_level(level for level in ("B", "D")) == "D"


class TestCategoryUnlock:
    def test_any_level_opens_category(self):
        category = _category(("G", "H", "I"))
        assert is_category_unlocked(category, "F")

    def test_category_anchored_higher_stays_locked(self):
        category = _category(("I", "J"))
        assert not is_category_unlocked(category, "F")

    def test_anchor_is_lowest_level_regardless_of_order(self):
        category = _category(("I", "G", "H"))
        assert category.anchor_level == "G"

    def test_anchor_falls_back_to_first_listed_without_ranked_levels(self):
        category = _category(("XV", "XM"))
        assert category.anchor_level == "XV"

    def test_empty_category_rejected(self):
        with pytest.raises(ValueError):
            _category(())

    def test_requirement_uses_anchor(self):
        category = _category(("J", "I"))
        assert category_unlock_requirement(category, "4A") == "H"
        assert category_unlock_requirement(category, "H") is None

    def test_almost_unlocked_uses_anchor(self):
        category = _category(("J", "I"))
        assert is_category_almost_unlocked(category, "G")
        assert not is_category_almost_unlocked(category, "F")
        assert not is_category_almost_unlocked(category, "H")

    def test_builtin_categories_partition(self):
        opened = unlocked_categories("B")
        closed = locked_categories("B")
        assert {c.id for c in opened} == {"counting", "addition", "subtraction", "multiplication", "division"}
        assert len(opened) + len(closed) == len(VIDEO_CATEGORIES)
        assert not {c.id for c in opened} & {c.id for c in closed}

    def test_division_needs_c(self):
        division = get_category_by_id("division")
        assert is_category_unlocked(division, "B")  # C is within the buffer
        assert not is_category_unlocked(division, "A")

    def test_unlock_stats(self):
        assert category_unlock_stats(("3A", "2A", "A", "B"), "4A") == {"unlocked": 1, "total": 4}
        assert category_unlock_stats(("K", "L"), "7A") == {"unlocked": 0, "total": 2}
