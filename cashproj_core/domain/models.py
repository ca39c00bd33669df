from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd

from cashproj_core.domain.errors import ConfigurationError, InputError, InvariantViolation

MonthLike = Union[str, dt.date, pd.Period]


def parse_month(value: MonthLike) -> pd.Period:
    """
    Normalize "YYYY-MM", "YYYY-MM-DD", a date or a Period to a monthly Period.
    Raises ValueError on anything else.
    """
    if isinstance(value, pd.Period):
        return value.asfreq("M")
    if isinstance(value, dt.date):
        return pd.Period(year=value.year, month=value.month, freq="M")
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid month: {value!r}")
    txt = value.strip()
    for fmt in ("%Y-%m", "%Y-%m-%d"):
        try:
            parsed = dt.datetime.strptime(txt, fmt)
        except ValueError:
            continue
        return pd.Period(year=parsed.year, month=parsed.month, freq="M")
    raise ValueError(f"Invalid month: {value!r}")


def current_month() -> pd.Period:
    return parse_month(dt.date.today())


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through repr so 0.1 stays 0.1
        value = repr(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


class Recurrence(enum.Enum):
    ONE_OFF = "one_off"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def is_recurring(self) -> bool:
        return self is not Recurrence.ONE_OFF

    def monthly_equivalent(self, amount: Decimal) -> Decimal:
        """Scale one occurrence to its average monthly amount."""
        try:
            per, every = _MONTHLY_FACTORS[self]
        except KeyError:
            raise InvariantViolation(f"No monthly factor for {self!r}") from None
        return amount * per / every

    @classmethod
    def parse(cls, text: str) -> Tuple["Recurrence", Optional[pd.Period]]:
        """
        Parse a frequency string such as "monthly", "w" or "once(2023-12-05)".
        The optional parenthesized date only applies to one-off events.
        """
        raw = str(text).strip().lower()
        head, _, tail = raw.partition("(")
        kind = _RECURRENCE_ALIASES.get(head.strip())
        if kind is None:
            raise InputError(f"Invalid recurrence kind: {text!r}")

        embedded: Optional[pd.Period] = None
        if tail:
            if kind is not cls.ONE_OFF or not tail.endswith(")"):
                raise InputError(f"Invalid recurrence kind: {text!r}")
            try:
                embedded = parse_month(tail[:-1])
            except ValueError as exc:
                raise InputError(f"Invalid one-off date in {text!r}") from exc
        return kind, embedded


_MONTHLY_FACTORS: Dict[Recurrence, Tuple[Decimal, Decimal]] = {
    Recurrence.ONE_OFF: (Decimal("1"), Decimal("1")),
    Recurrence.DAILY: (Decimal("30"), Decimal("1")),
    Recurrence.WEEKLY: (Decimal("4.5"), Decimal("1")),
    Recurrence.BIWEEKLY: (Decimal("2.25"), Decimal("1")),
    Recurrence.MONTHLY: (Decimal("1"), Decimal("1")),
    Recurrence.QUARTERLY: (Decimal("1"), Decimal("3")),
    Recurrence.YEARLY: (Decimal("1"), Decimal("12")),
}

_RECURRENCE_ALIASES: Dict[str, Recurrence] = {
    "1": Recurrence.ONE_OFF,
    "once": Recurrence.ONE_OFF,
    "onetime": Recurrence.ONE_OFF,
    "one_off": Recurrence.ONE_OFF,
    "one-off": Recurrence.ONE_OFF,
    "d": Recurrence.DAILY,
    "day": Recurrence.DAILY,
    "daily": Recurrence.DAILY,
    "w": Recurrence.WEEKLY,
    "week": Recurrence.WEEKLY,
    "weekly": Recurrence.WEEKLY,
    "biweekly": Recurrence.BIWEEKLY,
    "m": Recurrence.MONTHLY,
    "month": Recurrence.MONTHLY,
    "monthly": Recurrence.MONTHLY,
    "quarter": Recurrence.QUARTERLY,
    "quarterly": Recurrence.QUARTERLY,
    "y": Recurrence.YEARLY,
    "year": Recurrence.YEARLY,
    "yearly": Recurrence.YEARLY,
}


class EventKind(enum.Enum):
    BILL = "bill"
    INCOME = "income"
    INVESTMENT = "investment"
    SUBSCRIPTION = "subscription"
    OTHER = "other"

    @classmethod
    def parse(cls, text: str) -> "EventKind":
        raw = str(text).strip().lower()
        if raw == "sub":
            return cls.SUBSCRIPTION
        try:
            return cls(raw)
        except ValueError:
            raise InputError(f"Invalid event kind: {text!r}") from None

    @property
    def sign(self) -> int:
        return 1 if self is EventKind.INCOME else -1


@dataclasses.dataclass(frozen=True)
class CashEvent:
    label: str
    amount: Decimal  # positive = inflow, negative = outflow
    recurrence: Recurrence
    start_month: Optional[pd.Period] = None
    kind: Optional[EventKind] = None
    taxable: bool = False

    def __post_init__(self):
        if not isinstance(self.recurrence, Recurrence):
            raise InputError(f"Invalid recurrence kind for {self.label!r}: {self.recurrence!r}")
        try:
            amount = to_decimal(self.amount)
        except ValueError as exc:
            raise InputError(f"Invalid amount for {self.label!r}: {self.amount!r}") from exc
        if not amount.is_finite():
            raise InputError(f"Amount for {self.label!r} must be finite, got {self.amount!r}")
        object.__setattr__(self, "amount", amount)

        if self.start_month is not None:
            try:
                object.__setattr__(self, "start_month", parse_month(self.start_month))
            except ValueError as exc:
                raise InputError(f"Invalid start month for {self.label!r}: {self.start_month!r}") from exc
        elif self.recurrence is Recurrence.ONE_OFF:
            raise InputError(f"One-off event {self.label!r} needs a start month")

    def net_amount(self, tax_rate: Decimal = Decimal("0")) -> Decimal:
        if self.taxable:
            return self.amount * (Decimal("1") - tax_rate)
        return self.amount


@dataclasses.dataclass(frozen=True)
class Horizon:
    start: pd.Period
    month_count: int

    def __post_init__(self):
        if isinstance(self.month_count, bool) or not isinstance(self.month_count, int):
            raise ConfigurationError(f"month_count must be an integer, got {self.month_count!r}")
        if self.month_count < 1:
            raise ConfigurationError(f"month_count must be at least 1, got {self.month_count}")
        try:
            object.__setattr__(self, "start", parse_month(self.start))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid horizon start month: {self.start!r}") from exc

    @property
    def end(self) -> pd.Period:
        return self.start + (self.month_count - 1)

    def months(self) -> List[pd.Period]:
        return list(pd.period_range(start=self.start, periods=self.month_count, freq="M"))

    def contains(self, month: pd.Period) -> bool:
        return self.start <= month <= self.end


@dataclasses.dataclass(frozen=True)
class ProjectionConfig:
    start_month: Optional[pd.Period] = None  # None = current month
    months: int = 12
    tax_rate: Decimal = Decimal("0")

    def __post_init__(self):
        try:
            rate = to_decimal(self.tax_rate)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid tax rate: {self.tax_rate!r}") from exc
        if not rate.is_finite() or rate < 0 or rate > 1:
            raise ConfigurationError(f"tax_rate must be within [0, 1], got {self.tax_rate!r}")
        object.__setattr__(self, "tax_rate", rate)

    def horizon(self) -> Horizon:
        start = self.start_month if self.start_month is not None else current_month()
        return Horizon(start=start, month_count=self.months)


@dataclasses.dataclass(frozen=True)
class Contribution:
    month: pd.Period
    amount: Decimal


@dataclasses.dataclass(frozen=True)
class ProjectionRow:
    month: pd.Period
    monthly_total: Decimal
    cumulative_total: Decimal


@dataclasses.dataclass
class ProjectionResult:
    config: ProjectionConfig
    horizon: Horizon
    rows: List[ProjectionRow]

    @property
    def final_balance(self) -> Decimal:
        return self.rows[-1].cumulative_total if self.rows else Decimal("0")

    def to_timeseries(self) -> List[Tuple[str, str, str]]:
        return [(str(r.month), str(r.monthly_total), str(r.cumulative_total)) for r in self.rows]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "monthly_total": [r.monthly_total for r in self.rows],
                "cumulative_total": [r.cumulative_total for r in self.rows],
            },
            index=pd.PeriodIndex([r.month for r in self.rows], freq="M", name="month"),
        )
