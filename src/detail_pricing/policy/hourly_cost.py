"""
Hourly Cost - Spreads monthly overhead over the hours the shop is open.

Used to pre-fill a service's labor cost per hour:
1. Monthly expenses = fixed + variable operational costs
2. Working days per month = open weekdays × weeks per month
3. Average daily hours = mean of each open day's span, minus the lunch break
4. Hourly cost = (monthly expenses / working days) / average daily hours
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..config.settings import Settings, get_settings
from ..utils.formatting import parse_hhmm_to_minutes
from .models import WEEKDAYS, CostType, OperationalCost, OperationalHours

logger = logging.getLogger(__name__)


@dataclass
class HourlyCostBreakdown:
    fixed_costs: float
    variable_costs: float
    total_monthly_expenses: float
    working_days_per_month: int
    average_daily_working_hours: float
    daily_cost: float
    hourly_cost: float


def net_working_minutes(start: Optional[str], end: Optional[str], lunch_break_minutes: int = 60) -> int:
    """Minutes worked in a day; spans no longer than the break count as zero."""
    if not start or not end:
        return 0
    duration = parse_hhmm_to_minutes(end) - parse_hhmm_to_minutes(start)
    if duration > lunch_break_minutes:
        return duration - lunch_break_minutes
    return 0


def calculate_hourly_cost(
    costs: Iterable[OperationalCost],
    hours: OperationalHours,
    settings: Optional[Settings] = None
) -> HourlyCostBreakdown:
    settings = settings or get_settings()
    costs = list(costs)

    fixed = sum(c.value for c in costs if c.type == CostType.FIXED)
    variable = sum(c.value for c in costs if c.type == CostType.VARIABLE)
    total_expenses = fixed + variable

    open_days = [day for day in WEEKDAYS if hours.is_open(day)]
    working_days = len(open_days) * settings.weeks_per_month

    total_minutes = 0
    days_with_hours = 0
    for day in open_days:
        start, end = hours.span(day)
        minutes = net_working_minutes(start, end, settings.lunch_break_minutes)
        if minutes > 0:
            total_minutes += minutes
            days_with_hours += 1

    average_hours = (total_minutes / days_with_hours) / 60 if days_with_hours > 0 else 0.0
    daily_cost = total_expenses / working_days if working_days > 0 else 0.0
    hourly_cost = daily_cost / average_hours if average_hours > 0 else 0.0

    if hourly_cost == 0 and total_expenses > 0:
        logger.warning("Operational hours are not configured; hourly cost is zero")

    return HourlyCostBreakdown(
        fixed_costs=fixed,
        variable_costs=variable,
        total_monthly_expenses=total_expenses,
        working_days_per_month=working_days,
        average_daily_working_hours=average_hours,
        daily_cost=daily_cost,
        hourly_cost=hourly_cost,
    )
