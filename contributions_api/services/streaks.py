from collections.abc import Sequence

from contributions_api.services.contributions_service import DayRecord


def longest_streak(days: Sequence[DayRecord]) -> int:
    """Return the longest run of consecutive days with contributions."""

    longest = 0
    current = 0
    for day in days:
        if day.count > 0:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def current_streak(days: Sequence[DayRecord]) -> int:
    """Return the run of days with contributions ending at the latest day."""

    streak = 0
    for day in reversed(days):
        if day.count <= 0:
            break
        streak += 1
    return streak
