"""
Data models for the business day calculator using Pydantic.
"""

from datetime import datetime
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_wall_clock(value: datetime, timezone: Optional[str] = None) -> datetime:
    """
    Convert a timestamp to naive wall-clock time of the venue.

    Business days are computed on local wall-clock time, while the POS
    stores sales as UTC instants ("2024-03-15T22:30:00Z"). Aware values are
    converted into the venue timezone, or the system local timezone when
    none is configured, and their tzinfo is dropped. Naive values are
    already wall-clock time and are returned unchanged.

    Args:
        value: Naive or aware timestamp.
        timezone: IANA timezone of the venue.

    Returns:
        Naive datetime in venue wall-clock time.
    """
    if value.tzinfo is None:
        return value
    if timezone:
        return value.astimezone(ZoneInfo(timezone)).replace(tzinfo=None)
    return value.astimezone().replace(tzinfo=None)


class TimeOfDay(BaseModel):
    """Wall-clock time of day in the venue's local time.

    Values are not range checked: "25:99" is a legal TimeOfDay and rolls
    over arithmetically wherever it is applied to a date.
    """

    model_config = ConfigDict(frozen=True)

    hour: int = Field(default=0, description="Hour component")
    minute: int = Field(default=0, description="Minute component")

    def as_tuple(self) -> tuple:
        return (self.hour, self.minute)


class BusinessDayConfig(BaseModel):
    """Business day settings as stored by the venue.

    Accepts both snake_case and the camelCase keys used by the POS settings
    store (autoStartTime, businessDayEndHour).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    auto_start_time: str = Field(
        default="06:00", alias="autoStartTime", description="Business day start (HH:MM)"
    )
    business_day_end_hour: Optional[str] = Field(
        default=None, alias="businessDayEndHour", description="Business day end (HH:MM)"
    )


class BusinessDayRange(BaseModel):
    """Concrete start and end instants of one business day."""

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="First instant of the business day")
    end: datetime = Field(..., description="Last instant of the business day")


class Transaction(BaseModel):
    """A completed sale as recorded by a till."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(default=None, description="Transaction id")
    created_at: datetime = Field(..., alias="createdAt", description="When the sale was made")
    total: float = Field(..., description="Total amount charged")
    tax: float = Field(default=0.0, description="Tax included in the total")
    tip: float = Field(default=0.0, description="Tip amount")
    payment_method: str = Field(..., alias="paymentMethod", description="Payment method name")
    till_id: Optional[int] = Field(default=None, alias="tillId", description="Till id")
    till_name: str = Field(default="", alias="tillName", description="Till display name")

    @field_validator("till_name", mode="before")
    @classmethod
    def none_till_name(cls, v: Optional[str]) -> str:
        """Treat a missing till name as empty."""
        return v or ""

    def localized(self, timezone: Optional[str] = None) -> "Transaction":
        """Copy of the transaction with created_at in venue wall-clock time."""
        if self.created_at.tzinfo is None:
            return self
        return self.model_copy(update={"created_at": to_wall_clock(self.created_at, timezone)})


class PaymentMethodStats(BaseModel):
    """Aggregated figures for one payment method."""

    count: int = Field(default=0, ge=0)
    total: float = Field(default=0.0)


class TillStats(BaseModel):
    """Aggregated figures for one till."""

    transactions: int = Field(default=0, ge=0)
    total: float = Field(default=0.0)


class ClosingSummary(BaseModel):
    """Summary of the transactions covered by a closing."""

    transactions: int = Field(default=0, ge=0, description="Number of transactions")
    total_sales: float = Field(default=0.0, description="Sum of transaction totals")
    total_tax: float = Field(default=0.0, description="Sum of transaction tax")
    total_tips: float = Field(default=0.0, description="Sum of transaction tips")
    payment_methods: Dict[str, PaymentMethodStats] = Field(
        default_factory=dict, description="Figures per payment method"
    )
    tills: Dict[str, TillStats] = Field(
        default_factory=dict, description="Figures per till, keyed '<id>-<name>'"
    )


class BusinessDaySummary(BaseModel):
    """Closing summary for a single business day."""

    business_day: datetime = Field(..., description="Business day identifier (start instant)")
    window: BusinessDayRange = Field(..., description="Window of the business day")
    summary: ClosingSummary = Field(..., description="Aggregated transactions")


class ClosingWindow(BaseModel):
    """Period closed by an automatic business day closing."""

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="Start of the business day being closed")
    end: datetime = Field(..., description="Instant the closing happens")


class SchedulerStatus(BaseModel):
    """Snapshot of the automatic closing scheduler."""

    is_running: bool
    is_closing_in_progress: bool
    last_close_time: Optional[datetime] = None
    auto_close_enabled: bool
    business_day_end_hour: str
    next_scheduled_close: Optional[datetime] = None


class Config(BaseModel):
    """Configuration for the business day calculator."""

    auto_start_time: str = Field(default="06:00", description="Business day start (HH:MM)")
    business_day_end_hour: Optional[str] = Field(
        default=None, description="Business day end (HH:MM), unset for 24h days"
    )
    auto_close_enabled: bool = Field(default=False, description="Close business days automatically")
    timezone: Optional[str] = Field(
        default=None, description="IANA timezone of the venue, unset for local time"
    )
    output_format: str = Field(default="json", description="Default output format: json or csv")
    output_directory: str = Field(default="results", description="Directory for output files")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API server port")

    @field_validator("auto_start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        """Require an HH:MM shaped start time."""
        if ":" not in v:
            raise ValueError("auto_start_time must use the HH:MM format")
        return v

    @field_validator("business_day_end_hour")
    @classmethod
    def validate_end_hour(cls, v: Optional[str]) -> Optional[str]:
        """Require an HH:MM shaped end time when one is set."""
        if v and ":" not in v:
            raise ValueError("business_day_end_hour must use the HH:MM format")
        return v or None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Require a known IANA timezone name when one is set."""
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    def now(self) -> datetime:
        """Current wall-clock time of the venue, without tzinfo."""
        if self.timezone:
            return datetime.now(ZoneInfo(self.timezone)).replace(tzinfo=None)
        return datetime.now()

    def wall_clock(self, value: datetime) -> datetime:
        """Convert a timestamp to naive wall-clock time of the venue."""
        return to_wall_clock(value, self.timezone)

    def business_day_config(self) -> BusinessDayConfig:
        """Build the calculator config from the application config."""
        return BusinessDayConfig(
            auto_start_time=self.auto_start_time,
            business_day_end_hour=self.business_day_end_hour,
        )
