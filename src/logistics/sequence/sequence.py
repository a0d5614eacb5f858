"""Daily-sequential business identifiers.

Identifiers look like ``MTN-20240115-0007``: a prefix, the local calendar
day, and a four digit counter that restarts every day.

The counter for each ``(prefix, day)`` lives in its own ``DailySequence``
record. Issuing a number is a read-increment-write of that record inside the
caller's unit of work. The first issue of a day seeds the counter from the
newest record of that day, so numbers handed out before the counter existed
are never repeated. Candidates already taken in the source, such as numbers
supplied by callers, are skipped.
"""

from datetime import date, datetime, time, timedelta

from protean.exceptions import ObjectNotFoundError
from protean.fields import Date, Integer, String
from protean.utils.globals import current_domain

from logistics.domain import logistics

SEQUENCE_WIDTH = 4


@logistics.aggregate
class DailySequence:
    """Last value issued for one prefix on one day."""

    key = String(identifier=True, max_length=50)
    prefix = String(required=True, max_length=10)
    day = Date(required=True)
    last_value = Integer(default=0, min_value=0)

    @classmethod
    def start(cls, prefix: str, day: date, seed: int = 0) -> "DailySequence":
        return cls(key=sequence_key(prefix, day), prefix=prefix, day=day, last_value=seed)

    def advance(self) -> int:
        self.last_value = (self.last_value or 0) + 1
        return self.last_value


def sequence_key(prefix: str, day: date) -> str:
    return f"{prefix}-{day:%Y%m%d}"


def format_identifier(prefix: str, day: date, value: int) -> str:
    return f"{prefix}-{day:%Y%m%d}-{value:0{SEQUENCE_WIDTH}d}"


def parse_sequence(identifier: str | None) -> int | None:
    """Return the trailing counter of an identifier, or None when it has none."""
    if not identifier:
        return None
    suffix = identifier[-SEQUENCE_WIDTH:]
    if len(suffix) != SEQUENCE_WIDTH or not suffix.isdigit():
        return None
    return int(suffix)


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Start of ``day`` and start of the next day, in the server's local zone."""
    start = datetime.combine(day, time.min).astimezone()
    end = datetime.combine(day + timedelta(days=1), time.min).astimezone()
    return start, end


def _last_issued_on(day: date, source, number_field: str, timestamp_field: str) -> int:
    start, end = local_day_bounds(day)
    results = (
        current_domain.repository_for(source)
        ._dao.query.filter(
            **{
                f"{timestamp_field}__gte": start,
                f"{timestamp_field}__lt": end,
            }
        )
        .order_by(f"-{timestamp_field}")
        .limit(1)
        .all()
        .items
    )
    if not results:
        return 0
    return parse_sequence(getattr(results[0], number_field)) or 0


def _load_counter(prefix: str, day: date, source, number_field: str, timestamp_field: str) -> DailySequence:
    repo = current_domain.repository_for(DailySequence)
    try:
        return repo.get(sequence_key(prefix, day))
    except ObjectNotFoundError:
        seed = _last_issued_on(day, source, number_field, timestamp_field)
        return DailySequence.start(prefix, day, seed=seed)


def _is_taken(source, number_field: str, identifier: str) -> bool:
    query = current_domain.repository_for(source)._dao.query.filter(**{number_field: identifier})
    return bool(query.limit(1).all().items)


def _next_free(counter: DailySequence, source, number_field: str) -> str:
    """Advance ``counter`` past every identifier already present in ``source``."""
    while True:
        identifier = format_identifier(counter.prefix, counter.day, counter.advance())
        if not _is_taken(source, number_field, identifier):
            return identifier


def next_identifier(
    prefix: str,
    source,
    number_field: str,
    timestamp_field: str,
    today: date | None = None,
) -> str:
    """Issue the next identifier for ``prefix`` on ``today`` (defaults to the local date).

    Args:
        prefix: Identifier prefix, e.g. ``"MTN"``.
        source: Aggregate class whose records carry identifiers of this series.
        number_field: Attribute on ``source`` holding the identifier.
        timestamp_field: Attribute on ``source`` used to find the day's records.
        today: Day to issue for.
    """
    day = today or date.today()
    counter = _load_counter(prefix, day, source, number_field, timestamp_field)
    identifier = _next_free(counter, source, number_field)
    current_domain.repository_for(DailySequence).add(counter)
    return identifier


def peek_identifier(
    prefix: str,
    source,
    number_field: str,
    timestamp_field: str,
    today: date | None = None,
) -> str:
    """Preview the identifier ``next_identifier`` would issue, without reserving it."""
    day = today or date.today()
    counter = _load_counter(prefix, day, source, number_field, timestamp_field)
    return _next_free(counter, source, number_field)
