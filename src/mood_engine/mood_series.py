"""
Mood Series Aggregation.

Converts a raw sequence of mood entries into derived numeric series and
windowed statistics: mapped mood values, averages, volatility, weekly
buckets and downward-trend detection.

Every mood-to-number conversion goes through MoodScale. The risk
convention (higher = worse) and the wellbeing/rating conventions
(higher = better) are separate members and are never mixed implicitly.
"""

import logging
import math
import statistics
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Substituted when an entry is missing a field
DEFAULT_SLEEP_QUALITY = 3
DEFAULT_ENERGY_LEVEL = 3
DEFAULT_STRESS_LEVEL = 3
DEFAULT_SOCIAL_INTERACTIONS = 0
DEFAULT_ACTIVITY_DURATION = 30

# Points on the 0-100 risk scale the recent mean must rise by
DOWNWARD_TREND_MARGIN = 15.0
DOWNWARD_TREND_RECENT = 3
DOWNWARD_TREND_BASELINE = 4

ACTIVITY_CATALOG = (
    "Exercise",
    "Reading",
    "Meditation",
    "Social Activity",
    "Work",
    "Hobbies",
    "Rest",
    "Other",
)

METRICS = (
    "sleep_quality",
    "energy_level",
    "stress_level",
    "social_interaction_count",
)


class MoodLabel(str, Enum):
    """Self-reported mood, ordered from worst to best."""

    VERY_SAD = "Very Sad"
    SAD = "Sad"
    NEUTRAL = "Neutral"
    HAPPY = "Happy"
    VERY_HAPPY = "Very Happy"

    @classmethod
    def parse(cls, value: Any) -> Optional["MoodLabel"]:
        """Return the matching label, or None for unknown values."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


_MOOD_RANK = {label: rank for rank, label in enumerate(MoodLabel)}


class MoodScale(str, Enum):
    """
    Numeric conventions for mood labels.

    RISK:       Very Happy=0 ... Very Sad=4 (higher = worse)
    WELLBEING:  Very Sad=0 ... Very Happy=4 (higher = better)
    RATING:     Very Sad=1 ... Very Happy=5 (higher = better)
    """

    RISK = "risk"
    WELLBEING = "wellbeing"
    RATING = "rating"

    @property
    def minimum(self) -> int:
        return 1 if self is MoodScale.RATING else 0

    @property
    def maximum(self) -> int:
        return self.minimum + len(MoodLabel) - 1

    @property
    def higher_is_better(self) -> bool:
        return self is not MoodScale.RISK

    def value_of(self, label: Optional[MoodLabel]) -> int:
        """Map a label onto this scale. Missing labels count as Neutral."""
        rank = _MOOD_RANK[label or MoodLabel.NEUTRAL]
        if self is MoodScale.RISK:
            return self.maximum - rank
        return self.minimum + rank

    def normalized(self, label: Optional[MoodLabel]) -> float:
        """Map a label onto 0-100 in this scale's direction (25 per step)."""
        step = 100.0 / (self.maximum - self.minimum)
        return (self.value_of(label) - self.minimum) * step


@dataclass(frozen=True)
class Activity:
    """An activity logged alongside a mood entry."""

    name: str
    duration: Optional[float] = None  # minutes

    @property
    def resolved_duration(self) -> float:
        return self.duration if self.duration is not None else DEFAULT_ACTIVITY_DURATION

    def to_dict(self) -> dict:
        return {"name": self.name, "duration": self.resolved_duration}


@dataclass(frozen=True)
class MoodEntry:
    """A single timestamped self-report. Never mutated once created."""

    timestamp: datetime
    mood: Optional[MoodLabel] = None
    sleep_quality: Optional[int] = None
    energy_level: Optional[int] = None
    stress_level: Optional[int] = None
    social_interaction_count: Optional[int] = None
    activities: Tuple[Activity, ...] = ()
    notes: str = ""
    entry_id: Optional[str] = None

    @property
    def resolved_mood(self) -> MoodLabel:
        return self.mood or MoodLabel.NEUTRAL

    @property
    def resolved_sleep_quality(self) -> int:
        return _or_default(self.sleep_quality, DEFAULT_SLEEP_QUALITY)

    @property
    def resolved_energy_level(self) -> int:
        return _or_default(self.energy_level, DEFAULT_ENERGY_LEVEL)

    @property
    def resolved_stress_level(self) -> int:
        return _or_default(self.stress_level, DEFAULT_STRESS_LEVEL)

    @property
    def resolved_social_interaction_count(self) -> int:
        return _or_default(self.social_interaction_count, DEFAULT_SOCIAL_INTERACTIONS)

    def metric(self, name: str) -> int:
        """Resolved value of one of METRICS."""
        if name not in METRICS:
            raise KeyError(f"Unknown metric: {name}")
        return getattr(self, f"resolved_{name}")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "entry_id": self.entry_id,
            "timestamp": as_utc(self.timestamp).isoformat(),
            "mood": self.resolved_mood.value,
            "sleep_quality": self.resolved_sleep_quality,
            "energy_level": self.resolved_energy_level,
            "stress_level": self.resolved_stress_level,
            "social_interaction_count": self.resolved_social_interaction_count,
            "activities": [a.to_dict() for a in self.activities],
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MoodEntry":
        """
        Build an entry from a loosely-typed mapping.

        Accepts snake_case or camelCase keys. Malformed numeric fields are
        logged and left empty so the documented defaults apply later.

        Raises:
            ValueError: if the timestamp is missing or unparsable
        """
        entry_id = _first(data, "entry_id", "id", "_id")
        timestamp = parse_timestamp(_first(data, "timestamp", "created_at", "createdAt", "date"))
        if timestamp is None:
            raise ValueError(f"Mood entry {entry_id} has no usable timestamp")

        raw_mood = data.get("mood")
        mood = MoodLabel.parse(raw_mood)
        if mood is None and raw_mood is not None:
            logger.warning(f"[SERIES] Entry {entry_id}: unknown mood {raw_mood!r}, using Neutral")

        return cls(
            timestamp=timestamp,
            mood=mood,
            sleep_quality=_scale_value(data, entry_id, "sleep_quality", "sleepQuality"),
            energy_level=_scale_value(data, entry_id, "energy_level", "energyLevel"),
            stress_level=_scale_value(data, entry_id, "stress_level", "stressLevel"),
            social_interaction_count=_count_value(
                data, entry_id, "social_interaction_count", "socialInteractionCount"
            ),
            activities=_parse_activities(data.get("activities"), entry_id),
            notes=data.get("notes") or "",
            entry_id=str(entry_id) if entry_id is not None else None,
        )


def _or_default(value: Optional[int], default: int) -> int:
    return default if value is None else value


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _to_int(value: Any) -> Optional[int]:
    # Whole-number floats like '3.0' are accepted; '4.9', NaN and inf are not
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def _scale_value(data: Mapping[str, Any], entry_id: Any, *keys: str) -> Optional[int]:
    raw = _first(data, *keys)
    value = _to_int(raw)
    if value is None or not 1 <= value <= 5:
        if raw is not None:
            logger.warning(f"[SERIES] Entry {entry_id}: invalid {keys[0]}={raw!r}, using default")
        return None
    return value


def _count_value(data: Mapping[str, Any], entry_id: Any, *keys: str) -> Optional[int]:
    raw = _first(data, *keys)
    value = _to_int(raw)
    if value is None or value < 0:
        if raw is not None:
            logger.warning(f"[SERIES] Entry {entry_id}: invalid {keys[0]}={raw!r}, using default")
        return None
    return value


def _duration_value(raw: Any, entry_id: Any, name: str) -> Optional[float]:
    if raw is None:
        return None
    try:
        duration = float(raw)
    except (TypeError, ValueError):
        duration = None
    if duration is None or not math.isfinite(duration) or duration < 0:
        logger.warning(
            f"[SERIES] Entry {entry_id}: invalid duration {raw!r} for {name}, "
            f"using {DEFAULT_ACTIVITY_DURATION} minutes"
        )
        return None
    return duration


def _parse_activities(raw: Any, entry_id: Any = None) -> Tuple[Activity, ...]:
    if not raw:
        return ()
    if not isinstance(raw, (list, tuple)):
        logger.warning(f"[SERIES] Entry {entry_id}: activities is not a list ({raw!r}), ignoring")
        return ()

    activities = []
    for item in raw:
        if isinstance(item, Activity):
            activities.append(item)
        elif isinstance(item, str) and item.strip():
            activities.append(Activity(name=item.strip()))
        elif isinstance(item, Mapping) and item.get("name"):
            name = str(item["name"])
            duration = _duration_value(item.get("duration"), entry_id, name)
            activities.append(Activity(name=name, duration=duration))
        else:
            logger.warning(f"[SERIES] Entry {entry_id}: skipping unreadable activity {item!r}")
    return tuple(activities)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a datetime, date or ISO-8601 string into an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    try:
        return as_utc(datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")))
    except ValueError:
        return None


def as_utc(ts: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_entries(rows: Iterable[Mapping[str, Any]]) -> List[MoodEntry]:
    """Parse many rows, skipping (and logging) any without a usable timestamp."""
    entries = []
    for row in rows:
        try:
            entries.append(MoodEntry.from_dict(row))
        except ValueError as e:
            logger.warning(f"[SERIES] Skipping entry: {e}")
    return entries


# ============================================================================
# Series math
# ============================================================================


def sort_entries(entries: Iterable[MoodEntry]) -> List[MoodEntry]:
    """Stable sort by timestamp; equal timestamps keep their input order."""
    return sorted(entries, key=lambda e: as_utc(e.timestamp))


def filter_window(
    entries: Iterable[MoodEntry],
    days: Optional[int],
    now: Optional[datetime] = None,
) -> List[MoodEntry]:
    """
    Select entries from the last `days` days, then sort them.

    Both boundaries are inclusive. `days=None` keeps every entry.
    """
    if days is None:
        return sort_entries(entries)

    now = as_utc(now) if now else datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    selected = [e for e in entries if cutoff <= as_utc(e.timestamp) <= now]
    return sort_entries(selected)


def map_mood_values(
    entries: Iterable[MoodEntry],
    scale: MoodScale,
    normalized: bool = False,
) -> List[float]:
    """Map each entry's mood onto `scale`, optionally rescaled to 0-100."""
    if normalized:
        return [scale.normalized(e.mood) for e in entries]
    return [scale.value_of(e.mood) for e in entries]


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return float(statistics.mean(values))


def calculate_volatility(values: Sequence[float]) -> float:
    """Mean absolute change between consecutive values (0 for < 2 values)."""
    if len(values) < 2:
        return 0.0
    changes = [abs(values[i] - values[i - 1]) for i in range(1, len(values))]
    return mean(changes)


def detect_downward_trend(
    scores: Sequence[float],
    margin: float = DOWNWARD_TREND_MARGIN,
) -> bool:
    """
    True when the last 3 risk scores average more than `margin` above the
    4 scores before them. Needs at least 7 scores.
    """
    needed = DOWNWARD_TREND_RECENT + DOWNWARD_TREND_BASELINE
    if len(scores) < needed:
        return False

    recent = scores[-DOWNWARD_TREND_RECENT:]
    baseline = scores[-needed:-DOWNWARD_TREND_RECENT]
    return mean(recent) - mean(baseline) > margin


@dataclass
class WeeklyBucket:
    """Entries grouped into one Monday-start calendar week."""

    week_start: date
    count: int = 0
    mood_sum: float = 0.0
    sleep_sum: float = 0.0
    energy_sum: float = 0.0
    social_sum: float = 0.0
    stress_sum: float = 0.0
    activities: Dict[str, float] = field(default_factory=dict)

    def add(self, entry: MoodEntry, scale: MoodScale) -> None:
        self.count += 1
        self.mood_sum += scale.value_of(entry.mood)
        self.sleep_sum += entry.resolved_sleep_quality
        self.energy_sum += entry.resolved_energy_level
        self.social_sum += entry.resolved_social_interaction_count
        self.stress_sum += entry.resolved_stress_level
        for activity in entry.activities:
            self.activities[activity.name] = (
                self.activities.get(activity.name, 0) + activity.resolved_duration
            )

    def _average(self, total: float) -> float:
        return total / self.count if self.count else 0.0

    @property
    def average_mood(self) -> float:
        return self._average(self.mood_sum)

    @property
    def average_sleep_quality(self) -> float:
        return self._average(self.sleep_sum)

    @property
    def average_energy_level(self) -> float:
        return self._average(self.energy_sum)

    @property
    def average_social_interaction_count(self) -> float:
        return self._average(self.social_sum)

    @property
    def average_stress_level(self) -> float:
        return self._average(self.stress_sum)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "week": self.week_start.isoformat(),
            "count": self.count,
            "average_mood": self.average_mood,
            "activities": dict(self.activities),
            "average_sleep_quality": self.average_sleep_quality,
            "average_energy_level": self.average_energy_level,
            "average_social_interaction_count": self.average_social_interaction_count,
            "average_stress_level": self.average_stress_level,
        }


def week_start_for(ts: datetime) -> date:
    """Monday of the ISO week containing `ts` (Sunday belongs to the prior week)."""
    day = as_utc(ts).date()
    return day - timedelta(days=day.weekday())


def build_weekly_buckets(
    entries: Iterable[MoodEntry],
    scale: MoodScale = MoodScale.WELLBEING,
) -> List[WeeklyBucket]:
    """Group entries by calendar week, oldest week first."""
    buckets: Dict[date, WeeklyBucket] = {}
    for entry in sort_entries(entries):
        week = week_start_for(entry.timestamp)
        if week not in buckets:
            buckets[week] = WeeklyBucket(week_start=week)
        buckets[week].add(entry, scale)
    return [buckets[week] for week in sorted(buckets)]


@dataclass
class SeriesSummary:
    """Derived series and statistics for one lookback window."""

    window_days: Optional[int]
    scale: MoodScale
    entry_count: int = 0
    mood_values: List[float] = field(default_factory=list)
    average_mood: float = 0.0
    volatility: float = 0.0
    normalized_volatility: float = 0.0
    weekly_buckets: List[WeeklyBucket] = field(default_factory=list)
    sleep_values: List[int] = field(default_factory=list)
    energy_values: List[int] = field(default_factory=list)
    stress_values: List[int] = field(default_factory=list)
    social_values: List[int] = field(default_factory=list)
    activity_counts: List[int] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.entry_count > 0

    @property
    def average_sleep_quality(self) -> float:
        return mean(self.sleep_values)

    @property
    def average_energy_level(self) -> float:
        return mean(self.energy_values)

    @property
    def average_stress_level(self) -> float:
        return mean(self.stress_values)

    @property
    def average_social_interaction_count(self) -> float:
        return mean(self.social_values)

    @property
    def average_activity_count(self) -> float:
        return mean(self.activity_counts)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "window_days": self.window_days,
            "scale": self.scale.value,
            "entry_count": self.entry_count,
            "has_data": self.has_data,
            "mood_values": list(self.mood_values),
            "average_mood": self.average_mood,
            "volatility": self.volatility,
            "normalized_volatility": self.normalized_volatility,
            "weekly_buckets": [b.to_dict() for b in self.weekly_buckets],
            "average_sleep_quality": self.average_sleep_quality,
            "average_energy_level": self.average_energy_level,
            "average_stress_level": self.average_stress_level,
            "average_social_interaction_count": self.average_social_interaction_count,
            "average_activity_count": self.average_activity_count,
        }


class MoodSeriesAggregator:
    """
    Builds SeriesSummary objects from mood entries.

    Stateless apart from the default scale, so a single instance can be
    shared between requests and users.
    """

    def __init__(self, default_scale: MoodScale = MoodScale.WELLBEING):
        self.default_scale = default_scale

    def window(
        self,
        entries: Iterable[MoodEntry],
        window_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[MoodEntry]:
        return filter_window(entries, window_days, now)

    def summarize(
        self,
        entries: Iterable[MoodEntry],
        window_days: Optional[int] = None,
        scale: Optional[MoodScale] = None,
        now: Optional[datetime] = None,
    ) -> SeriesSummary:
        """
        Summarize the entries inside the lookback window.

        Args:
            entries: Mood entries in any order
            window_days: Lookback in days, or None for the full history
            scale: Mood convention for mood_values (defaults to default_scale)
            now: Reference time for the window (defaults to now, UTC)

        Returns:
            SeriesSummary; has_data is False when the window is empty
        """
        scale = scale or self.default_scale
        selected = self.window(entries, window_days, now)

        if not selected:
            logger.debug(f"[SERIES] No entries in {window_days}-day window")
            return SeriesSummary(window_days=window_days, scale=scale)

        mood_values = map_mood_values(selected, scale)
        summary = SeriesSummary(
            window_days=window_days,
            scale=scale,
            entry_count=len(selected),
            mood_values=mood_values,
            average_mood=mean(mood_values),
            volatility=calculate_volatility(mood_values),
            normalized_volatility=calculate_volatility(
                map_mood_values(selected, scale, normalized=True)
            ),
            weekly_buckets=build_weekly_buckets(selected, scale),
            sleep_values=[e.resolved_sleep_quality for e in selected],
            energy_values=[e.resolved_energy_level for e in selected],
            stress_values=[e.resolved_stress_level for e in selected],
            social_values=[e.resolved_social_interaction_count for e in selected],
            activity_counts=[len(e.activities) for e in selected],
        )

        logger.debug(
            f"[SERIES] {summary.entry_count} entries ({scale.value}): "
            f"avg={summary.average_mood:.2f}, volatility={summary.volatility:.2f}"
        )
        return summary


# Global shared instance
mood_series_aggregator = MoodSeriesAggregator()


def summarize_series(
    entries: Iterable[MoodEntry],
    window_days: Optional[int] = None,
    scale: MoodScale = MoodScale.WELLBEING,
    now: Optional[datetime] = None,
) -> SeriesSummary:
    """Convenience function to summarize a series with the shared aggregator."""
    return mood_series_aggregator.summarize(entries, window_days, scale, now)
