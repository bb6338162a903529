"""
FastAPI REST API for the business day calculator.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from business_day_calculator import __version__
from business_day_calculator.config.manager import ConfigManager
from business_day_calculator.core.calculator import BusinessDayCalculator
from business_day_calculator.core.closing import group_by_business_day
from business_day_calculator.core.scheduler import (
    BusinessDayScheduler,
    closing_window,
    seconds_until_next_minute,
)
from business_day_calculator.core.time_parser import parse_time_of_day, parse_time_of_day_strict
from business_day_calculator.data.schemas import (
    BusinessDayConfig,
    BusinessDayRange,
    BusinessDaySummary,
    ClosingWindow,
    SchedulerStatus,
    Transaction,
)

logger = logging.getLogger(__name__)

# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()


# API Models
class BusinessDaySettings(BaseModel):
    """Business day settings sent with a request, defaults from the config."""

    auto_start_time: Optional[str] = Field(None, description="Business day start (HH:MM)")
    business_day_end_hour: Optional[str] = Field(
        None,
        description="Business day end (HH:MM), an explicit null ignores the configured end",
    )
    strict: bool = Field(False, description="Reject malformed or out-of-range times")


class RangeRequest(BusinessDaySettings):
    """Request model for a single business day range."""

    anchor_date: date = Field(..., description="Anchor date")


class BucketRequest(BusinessDaySettings):
    """Request model for bucketing a transaction timestamp."""

    timestamp: datetime = Field(..., description="Transaction timestamp")


class BucketResponse(BaseModel):
    """Response model for a bucketed timestamp."""

    timestamp: datetime
    business_day: datetime
    window: BusinessDayRange


class DaysRequest(BusinessDaySettings):
    """Request model for the business days of a period."""

    start_date: date = Field(..., description="First anchor date")
    end_date: date = Field(..., description="Last anchor date")


class HoursResponse(BaseModel):
    """Response model for the length of a business day."""

    auto_start_time: str
    business_day_end_hour: str
    hours: int


class SummaryRequest(BusinessDaySettings):
    """Request model for per-business-day sales summaries."""

    transactions: List[Transaction] = Field(default_factory=list, description="Transactions")


class ClosingRequest(BusinessDaySettings):
    """Request model for the window of a closing."""

    closed_at: Optional[datetime] = Field(None, description="Closing instant, default now")


def _calculator(settings: BusinessDaySettings) -> BusinessDayCalculator:
    """Build a calculator from request settings and the loaded config."""
    if "business_day_end_hour" in settings.model_fields_set:
        end_hour = settings.business_day_end_hour or None
    else:
        end_hour = config.business_day_end_hour

    business_day = BusinessDayConfig(
        auto_start_time=settings.auto_start_time or config.auto_start_time,
        business_day_end_hour=end_hour,
    )
    parser = parse_time_of_day_strict if settings.strict else parse_time_of_day
    return BusinessDayCalculator(business_day, parser=parser)


def _log_closing(window: ClosingWindow) -> None:
    logger.info(
        "Business day closed: %s - %s", window.start.isoformat(), window.end.isoformat()
    )


scheduler = BusinessDayScheduler(lambda: config, _log_closing)


async def _run_scheduler() -> None:
    """Check for the end of the business day at the start of every minute."""
    while True:
        await asyncio.sleep(seconds_until_next_minute(config.now()))
        scheduler.check(config.now())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    scheduler.start()
    task = asyncio.create_task(_run_scheduler())

    yield

    # Cleanup
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    scheduler.stop()


# FastAPI app
app = FastAPI(
    title="Business Day Calculator API",
    description="Bucket POS transactions into business days that may cross midnight",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/")
async def root():
    """API root endpoint with basic info."""
    return {
        "name": "Business Day Calculator API",
        "version": __version__,
        "endpoints": {
            "POST /range": "Business day range for an anchor date",
            "POST /bucket": "Business day a timestamp belongs to",
            "POST /days": "Business days of a period",
            "POST /hours": "Hours in the business day",
            "POST /summary": "Sales summary per business day",
            "POST /closing-window": "Business day covered by a closing",
            "GET /scheduler/status": "State of the automatic closing scheduler",
            "GET /scheduler/next-close": "Next automatic closing",
            "POST /scheduler/force-close": "Close the business day now",
        },
    }


@app.post("/range", response_model=BusinessDayRange)
async def business_day_range(request: RangeRequest):
    """Calculate the business day starting on the anchor date."""
    try:
        return _calculator(request).range_for(request.anchor_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@app.post("/bucket", response_model=BucketResponse)
async def bucket_timestamp(request: BucketRequest):
    """Find the business day a transaction timestamp belongs to."""
    try:
        calculator = _calculator(request)
        timestamp = config.wall_clock(request.timestamp)
        business_day = calculator.business_day_of(timestamp)
        return BucketResponse(
            timestamp=timestamp,
            business_day=business_day,
            window=calculator.range_for(business_day),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@app.post("/days", response_model=List[BusinessDayRange])
async def business_days(request: DaysRequest):
    """List the business days anchored on each date of a period."""
    if request.end_date < request.start_date:
        raise HTTPException(
            status_code=400,
            detail="end_date must be after or equal to start_date",
        )

    try:
        return _calculator(request).days_between(request.start_date, request.end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@app.post("/hours", response_model=HoursResponse)
async def business_day_hours(request: BusinessDaySettings):
    """Number of whole hours in the business day."""
    try:
        calculator = _calculator(request)
        return HoursResponse(
            auto_start_time=calculator.config.auto_start_time,
            business_day_end_hour=(
                calculator.config.business_day_end_hour or calculator.config.auto_start_time
            ),
            hours=calculator.hours(),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/summary", response_model=List[BusinessDaySummary])
async def sales_summary(request: SummaryRequest):
    """Summarize transactions per business day."""
    try:
        calculator = _calculator(request)
        transactions = [t.localized(config.timezone) for t in request.transactions]
        return group_by_business_day(transactions, calculator.config, calculator.parser)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Summary error: {str(e)}")


@app.post("/closing-window", response_model=ClosingWindow)
async def closing(request: ClosingRequest):
    """Business day covered by a closing at the given instant."""
    try:
        calculator = _calculator(request)
        closed_at = config.wall_clock(request.closed_at) if request.closed_at else config.now()
        return closing_window(closed_at, calculator.config, calculator.parser)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/scheduler/status", response_model=SchedulerStatus)
async def scheduler_status():
    """State of the automatic closing scheduler."""
    return scheduler.status(config.now())


@app.get("/scheduler/next-close")
async def next_close():
    """Next automatic closing, None while the scheduler is stopped or disabled."""
    status = scheduler.status(config.now())
    return {
        "auto_close_enabled": status.auto_close_enabled,
        "business_day_end_hour": status.business_day_end_hour,
        "next_scheduled_close": (
            status.next_scheduled_close.isoformat() if status.next_scheduled_close else None
        ),
    }


@app.post("/scheduler/force-close", response_model=ClosingWindow)
async def force_close():
    """Close the business day immediately."""
    window = scheduler.force_close(config.now())
    if window is None:
        raise HTTPException(status_code=409, detail="Business day could not be closed")
    return window


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
