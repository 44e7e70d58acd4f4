"""
Unit tests for playback state calculation.
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from handpicked.playout import (
    ChannelTimeline,
    calculate_playback_state,
    elapsed_seconds,
    playable_indices,
    time_until_next_item,
    total_duration,
)
from tests.fixtures.factories import ScheduleItemFactory


@pytest.fixture
def schedule():
    """A:30s, B:20s, C:10s."""
    return ScheduleItemFactory.build_schedule([30, 20, 10], titles=["A", "B", "C"])


@pytest.fixture
def timeline(t0):
    return ChannelTimeline(channel_id=1, start_time=t0)


@pytest.mark.unit
class TestCalculatePlaybackState:
    """Tests for calculate_playback_state."""

    def test_second_item_mid_loop(self, schedule, timeline, t0):
        state = calculate_playback_state(schedule, timeline, t0 + timedelta(seconds=35))

        assert state.current_item.title == "B"
        assert state.current_item_index == 1
        assert state.offset_seconds == 5
        assert state.total_duration_seconds == 60

    def test_wraps_after_full_loops(self, schedule, timeline, t0):
        state = calculate_playback_state(schedule, timeline, t0 + timedelta(seconds=125))

        assert state.current_item.title == "A"
        assert state.current_item_index == 0
        assert state.offset_seconds == 5

    def test_disabled_item_is_skipped(self, schedule, timeline, t0):
        schedule[1] = replace(schedule[1], is_disabled=True)

        state = calculate_playback_state(schedule, timeline, t0 + timedelta(seconds=35))

        assert state.current_item.title == "C"
        assert state.current_item_index == 2
        assert state.offset_seconds == 5
        assert state.total_duration_seconds == 40

    def test_at_start_time(self, schedule, timeline, t0):
        state = calculate_playback_state(schedule, timeline, t0)

        assert state.current_item_index == 0
        assert state.offset_seconds == 0

    def test_future_start_prerolls_first_playable(self, schedule, timeline, t0):
        schedule[0] = replace(schedule[0], is_disabled=True)

        state = calculate_playback_state(schedule, timeline, t0 - timedelta(hours=1))

        assert state.current_item.title == "B"
        assert state.current_item_index == 1
        assert state.offset_seconds == 0

    def test_fractional_seconds_are_floored(self, schedule, timeline, t0):
        state = calculate_playback_state(schedule, timeline, t0 + timedelta(seconds=29, milliseconds=999))

        assert state.current_item_index == 0
        assert state.offset_seconds == 29

    def test_empty_schedule_has_no_state(self, timeline, t0):
        assert calculate_playback_state([], timeline, t0) is None

    def test_all_disabled_has_no_state(self, timeline, t0):
        schedule = ScheduleItemFactory.build_schedule([30, 20], disabled=[0, 1])

        assert calculate_playback_state(schedule, timeline, t0 + timedelta(seconds=10)) is None

    def test_aware_and_naive_datetimes_agree(self, schedule, timeline, t0):
        now = t0 + timedelta(seconds=35)

        naive = calculate_playback_state(schedule, timeline, now)
        aware = calculate_playback_state(schedule, timeline, now.replace(tzinfo=timezone.utc))

        assert naive == aware

    def test_seconds_remaining(self, schedule, timeline, t0):
        state = calculate_playback_state(schedule, timeline, t0 + timedelta(seconds=35))

        assert state.seconds_remaining == 15
        assert time_until_next_item(state.current_item, state.offset_seconds) == 15


@pytest.mark.unit
class TestPlaybackStateProperties:
    """Properties that hold for any schedule and instant."""

    @pytest.fixture
    def mixed_schedule(self):
        return ScheduleItemFactory.build_schedule([17, 3, 45, 8, 1, 29], disabled=[1, 4])

    def test_offset_and_prefix_match_loop_position(self, mixed_schedule, t0):
        timeline = ChannelTimeline(channel_id=1, start_time=t0)
        total = total_duration(mixed_schedule)

        for elapsed in range(0, 3 * total, 7):
            state = calculate_playback_state(mixed_schedule, timeline, t0 + timedelta(seconds=elapsed))

            assert 0 <= state.offset_seconds < state.current_item.duration_seconds
            prefix = sum(
                mixed_schedule[i].duration_seconds
                for i in playable_indices(mixed_schedule)
                if i < state.current_item_index
            )
            assert prefix + state.offset_seconds == elapsed % total

    def test_identical_inputs_give_identical_state(self, mixed_schedule, t0):
        timeline = ChannelTimeline(channel_id=1, start_time=t0)
        now = t0 + timedelta(seconds=1234)

        first = calculate_playback_state(mixed_schedule, timeline, now)
        second = calculate_playback_state(mixed_schedule, timeline, now)

        assert first == second

    @pytest.mark.parametrize("k", [1, 2, 10, 1000])
    def test_periodic_in_total_duration(self, mixed_schedule, t0, k):
        timeline = ChannelTimeline(channel_id=1, start_time=t0)
        total = total_duration(mixed_schedule)
        now = t0 + timedelta(seconds=50)

        assert calculate_playback_state(mixed_schedule, timeline, now) == calculate_playback_state(
            mixed_schedule, timeline, now + timedelta(seconds=k * total)
        )

    def test_disabled_items_never_play(self, mixed_schedule, t0):
        timeline = ChannelTimeline(channel_id=1, start_time=t0)

        seen = {
            calculate_playback_state(mixed_schedule, timeline, t0 + timedelta(seconds=s)).current_item_index
            for s in range(total_duration(mixed_schedule))
        }

        assert seen == set(playable_indices(mixed_schedule))

    def test_disabling_keeps_positions(self, mixed_schedule):
        positions = [item.position for item in mixed_schedule]

        mixed_schedule[2] = replace(mixed_schedule[2], is_disabled=True)

        assert [item.position for item in mixed_schedule] == positions


@pytest.mark.unit
class TestElapsedSeconds:
    """Tests for elapsed_seconds."""

    def test_negative_before_start(self, t0):
        assert elapsed_seconds(t0, t0 - timedelta(seconds=1)) == -1

    def test_negative_fraction_floors_down(self, t0):
        assert elapsed_seconds(t0, t0 - timedelta(milliseconds=1)) == -1

    def test_mixed_timezones(self):
        start = datetime(2024, 1, 1, 12, 0, 0)
        now = datetime(2024, 1, 1, 13, 0, 10, tzinfo=timezone(timedelta(hours=1)))

        assert elapsed_seconds(start, now) == 10
