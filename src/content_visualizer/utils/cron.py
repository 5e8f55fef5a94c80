"""Five-field cron expression parsing and scheduling."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import FrozenSet, List, Tuple


@dataclass(frozen=True)
class CronField:
    """A schedule field with its name and valid value range."""
    name: str
    minimum: int
    maximum: int
    note: str = ""

    @property
    def description(self) -> str:
        """Valid range as shown next to the field."""
        text = f"{self.minimum}-{self.maximum}"
        return f"{text} ({self.note})" if self.note else text


CRON_FIELDS: Tuple[CronField, ...] = (
    CronField("Minute", 0, 59),
    CronField("Hour", 0, 23),
    CronField("Day of Month", 1, 31),
    CronField("Month", 1, 12),
    CronField("Day of Week", 0, 6, "0 = Sunday, 7 is also accepted"),
)

# Give up looking for occurrences this many years after the start
SEARCH_HORIZON_YEARS = 5


def _parse_int(token: str, field: CronField) -> int:
    if not token.isdigit():
        raise ValueError(f"{field.name}: '{token}' is not a number")
    value = int(token)
    if field.name == "Day of Week" and value == 7:
        return value
    if not field.minimum <= value <= field.maximum:
        raise ValueError(
            f"{field.name}: {value} is outside the range {field.minimum}-{field.maximum}"
        )
    return value


def parse_field(token: str, field: CronField) -> FrozenSet[int]:
    """
    Expand one cron field into the set of values it selects.

    Supports ``*``, single values, ``a-b`` ranges, ``/n`` steps on either
    and comma separated lists of those.

    Raises:
        ValueError: If the token is malformed or out of range
    """
    values = set()
    for part in token.split(","):
        if not part:
            raise ValueError(f"{field.name}: empty list element in '{token}'")

        base, _, step_text = part.partition("/")
        step = 1
        if step_text or part.endswith("/"):
            if not step_text.isdigit() or int(step_text) == 0:
                raise ValueError(f"{field.name}: invalid step in '{part}'")
            step = int(step_text)

        if base == "*":
            start, end = field.minimum, field.maximum
        elif "-" in base:
            low, _, high = base.partition("-")
            start, end = _parse_int(low, field), _parse_int(high, field)
            if start > end:
                raise ValueError(f"{field.name}: range '{base}' is reversed")
        else:
            start = _parse_int(base, field)
            end = field.maximum if step_text else start

        values.update(v % 7 if field.name == "Day of Week" else v
                      for v in range(start, end + 1, step))
    return frozenset(values)


class CronExpression:
    """
    A parsed five-field cron schedule.

    Day-of-month and day-of-week follow the classic cron rule: when both
    are restricted a day matches if either does; otherwise both must.
    """

    def __init__(self, expression: str):
        """
        Parse a cron expression.

        Args:
            expression: Five whitespace separated fields

        Raises:
            ValueError: If the expression does not have five valid fields
        """
        tokens = expression.split()
        if len(tokens) != len(CRON_FIELDS):
            raise ValueError(
                f"Expected {len(CRON_FIELDS)} fields but found {len(tokens)} in '{expression.strip()}'"
            )

        self.expression = " ".join(tokens)
        self.tokens: Tuple[str, ...] = tuple(tokens)
        sets = [parse_field(token, field) for token, field in zip(tokens, CRON_FIELDS)]
        self.minutes, self.hours, self.days, self.months, self.weekdays = sets
        self._days_restricted = not tokens[2].startswith("*")
        self._weekdays_restricted = not tokens[4].startswith("*")

    def _day_matches(self, moment: datetime) -> bool:
        day_ok = moment.day in self.days
        weekday_ok = (moment.weekday() + 1) % 7 in self.weekdays
        if self._days_restricted and self._weekdays_restricted:
            return day_ok or weekday_ok
        return day_ok and weekday_ok

    def matches(self, moment: datetime) -> bool:
        """Check if the schedule fires at the given minute."""
        return (
            moment.minute in self.minutes
            and moment.hour in self.hours
            and moment.month in self.months
            and self._day_matches(moment)
        )

    def next_occurrences(self, start: datetime, count: int = 5) -> List[datetime]:
        """
        Compute the next firing times strictly after ``start``.

        Args:
            start: Reference time; seconds are ignored
            count: Maximum number of occurrences to return

        Returns:
            Up to ``count`` strictly increasing datetimes; fewer if the
            schedule cannot fire within the search horizon
        """
        occurrences: List[datetime] = []
        moment = start.replace(second=0, microsecond=0) + timedelta(minutes=1)
        last_year = start.year + SEARCH_HORIZON_YEARS

        while len(occurrences) < count and moment.year <= last_year:
            if moment.month not in self.months:
                if moment.month == 12:
                    moment = moment.replace(year=moment.year + 1, month=1, day=1, hour=0, minute=0)
                else:
                    moment = moment.replace(month=moment.month + 1, day=1, hour=0, minute=0)
            elif not self._day_matches(moment):
                moment = (moment + timedelta(days=1)).replace(hour=0, minute=0)
            elif moment.hour not in self.hours:
                moment = (moment + timedelta(hours=1)).replace(minute=0)
            elif moment.minute not in self.minutes:
                moment += timedelta(minutes=1)
            else:
                occurrences.append(moment)
                moment += timedelta(minutes=1)

        return occurrences
