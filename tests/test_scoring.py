"""Tests for points, xp, level, and overall streak rules."""

from __future__ import annotations

from datetime import date

import pytest

from studyhabits.errors import NotFound
from studyhabits.models.user import UserProfile
from studyhabits.services.scoring import (
    apply_completion,
    complete_habit,
    level_from_xp,
    next_streak,
)

TODAY = date(2024, 3, 10)


@pytest.mark.parametrize("xp, level", [(0, 1), (99, 1), (100, 2), (105, 2), (250, 3)])
def test_level_from_xp(xp, level):
    assert level_from_xp(xp) == level


class TestNextStreak:
    def test_first_ever_completion(self):
        assert next_streak(0, None, TODAY) == 1

    def test_same_day_unchanged(self):
        assert next_streak(4, TODAY, TODAY) == 4

    def test_consecutive_day_increments(self):
        assert next_streak(4, date(2024, 3, 9), TODAY) == 5

    def test_gap_resets(self):
        assert next_streak(4, date(2024, 3, 7), TODAY) == 1

    def test_clock_skew_into_past_resets(self):
        assert next_streak(4, date(2024, 3, 11), TODAY) == 1


def test_complete_habit_stamps_even_when_not_due(habit_factory):
    habit = habit_factory(last_completed=TODAY, total_completions=2)
    done = complete_habit(habit, TODAY)
    assert done.last_completed == TODAY
    assert done.total_completions == 3
    assert habit.total_completions == 2


class TestApplyCompletion:
    def test_awards_points_and_xp(self, habit_factory):
        habit = habit_factory()
        profile = UserProfile(name="Ana", habits=[habit])

        result = apply_completion(profile, habit.id, TODAY)

        assert result.points_awarded == 10
        assert result.profile.points == 10
        assert result.profile.xp == 10
        assert result.profile.overall_streak == 1
        assert result.profile.last_active == TODAY
        assert result.habit.total_completions == 1
        assert result.profile.habits[0].last_completed == TODAY
        assert not result.leveled_up
        # Input profile is untouched
        assert profile.points == 0

    def test_level_up_from_95_to_105(self, habit_factory):
        habit = habit_factory()
        profile = UserProfile(name="Ana", xp=95, points=95, habits=[habit])

        result = apply_completion(profile, habit.id, TODAY)

        assert result.profile.xp == 105
        assert result.profile.level == 2
        assert result.leveled_up

    def test_second_completion_same_day_keeps_streak(self, habit_factory):
        first, second = habit_factory(title="A"), habit_factory(title="B")
        profile = UserProfile(
            name="Ana", overall_streak=3, last_active=date(2024, 3, 9), habits=[first, second]
        )

        after_first = apply_completion(profile, first.id, TODAY).profile
        after_second = apply_completion(after_first, second.id, TODAY).profile

        assert after_first.overall_streak == 4
        assert after_second.overall_streak == 4
        assert after_second.points == 20

    def test_only_target_habit_changes(self, habit_factory):
        first, second = habit_factory(title="A"), habit_factory(title="B")
        profile = UserProfile(name="Ana", habits=[first, second])

        result = apply_completion(profile, second.id, TODAY)

        assert result.profile.habits[0] == first
        assert result.profile.habits[1].total_completions == 1

    def test_unknown_habit(self, habit_factory):
        profile = UserProfile(name="Ana", habits=[habit_factory()])
        with pytest.raises(NotFound):
            apply_completion(profile, "missing", TODAY)

    def test_leaderboard_entry_snapshot(self, habit_factory):
        habit = habit_factory()
        profile = UserProfile(name="Ana", xp=190, points=190, habits=[habit])

        entry = apply_completion(profile, habit.id, TODAY).leaderboard_entry()

        assert entry.name == "Ana"
        assert entry.points == 200
        assert entry.level == 3
        assert entry.streak == 1


def test_profile_level_tracks_xp():
    assert UserProfile(name="Ana").level == 1
    assert UserProfile(name="Ana", xp=199).level == 2
    assert UserProfile(name="Ana", xp=200).stats_fields()["level"] == 3
