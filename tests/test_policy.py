import pytest

from detail_pricing.engine import CostingMode
from detail_pricing.policy.costing_mode import CostingModeResolver
from detail_pricing.policy.hourly_cost import calculate_hourly_cost, net_working_minutes
from detail_pricing.policy.models import CostType, OperationalCost, OperationalHours


@pytest.fixture
def costs():
    return [
        OperationalCost("Rent", 2500.0, CostType.FIXED),
        OperationalCost("Energy", 400.0, "fixed"),
        OperationalCost("Water", 250.0, "variable"),
        OperationalCost("Marketing", 300.0, CostType.VARIABLE),
    ]


@pytest.fixture
def hours():
    weekdays = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday')
    start = {d: "08:00" for d in weekdays}
    end = {d: "18:00" for d in weekdays}
    start['saturday'], end['saturday'] = "08:00", "12:00"
    return OperationalHours(start=start, end=end)


class TestCostingMode:

    def test_per_service_by_default(self, settings, costs):
        assert CostingModeResolver(settings).resolve(costs) == CostingMode.PER_SERVICE

    def test_products_entry_switches_to_monthly_average(self, settings, costs):
        costs.append(OperationalCost(" produtos gastos no mês ", 800.0, "variable"))
        resolver = CostingModeResolver(settings)

        assert resolver.resolve(costs) == CostingMode.MONTHLY_AVERAGE
        assert resolver.find_products_cost(costs).value == 800.0


def test_net_working_minutes():
    assert net_working_minutes("08:00", "18:00") == 540
    assert net_working_minutes("08:00", "09:00") == 0
    assert net_working_minutes("08:00", None) == 0
    assert net_working_minutes("08:00", "12:00", lunch_break_minutes=0) == 240


def test_hourly_cost(settings, costs, hours):
    """
    3450 / (6 days x 4 weeks) = 143.75 per day.
    (5 x 540 + 180) / 6 = 480 min = 8 h per day.
    """
    breakdown = calculate_hourly_cost(costs, hours, settings)

    assert breakdown.fixed_costs == pytest.approx(2900.0)
    assert breakdown.variable_costs == pytest.approx(550.0)
    assert breakdown.working_days_per_month == 24
    assert breakdown.average_daily_working_hours == pytest.approx(8.0)
    assert breakdown.daily_cost == pytest.approx(143.75)
    assert breakdown.hourly_cost == pytest.approx(17.96875)


def test_hourly_cost_without_hours_is_zero(settings, costs):
    breakdown = calculate_hourly_cost(costs, OperationalHours(), settings)
    assert breakdown.working_days_per_month == 0
    assert breakdown.hourly_cost == 0.0
    assert breakdown.total_monthly_expenses == pytest.approx(3450.0)


def test_unknown_cost_type_is_rejected():
    with pytest.raises(ValueError):
        OperationalCost("Rent", 100.0, "sometimes")
