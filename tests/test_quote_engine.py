"""
Quote totals: cost assembly, fees, margins and suggested price.
"""
from dataclasses import replace

import pytest

from detail_pricing.engine import (
    AdjustmentKind,
    CommissionTerm,
    CostingMode,
    DiscountTerm,
    InvalidMarginError,
    PaymentKind,
    PaymentMethodFee,
    Product,
    ProductKind,
    QuoteRequest,
    ServiceLine,
    ServiceProductLink,
    calculate_quote_totals,
    suggested_price,
)


@pytest.fixture
def debit():
    return PaymentMethodFee(kind=PaymentKind.DEBIT, flat_rate_percent=2.0, name="Debit")


def test_single_service_with_commission_and_debit(engine, one_hour_service, debit):
    """
    R$ 50 labor + R$ 10 product, sold for R$ 100 with 10% commission and 2% debit fee.
    """
    request = QuoteRequest(
        services=[one_hour_service],
        commission=CommissionTerm(AdjustmentKind.PERCENTAGE, 10),
        payment_method=debit,
    )
    result = engine.calculate(request)

    assert result.total_products_cost == pytest.approx(10.0)
    assert result.total_labor_cost == pytest.approx(50.0)
    assert result.total_other_costs == pytest.approx(0.0)
    assert result.commission_amount == pytest.approx(10.0)
    assert result.payment_fee_amount == pytest.approx(2.0)
    assert result.total_cost == pytest.approx(72.0)
    assert result.total_service_value == pytest.approx(100.0)
    assert result.final_price_with_fee == pytest.approx(98.0)
    assert result.net_profit == pytest.approx(28.0)
    assert result.profit_margin_percent == pytest.approx(28.0)


def test_single_service_without_commission_or_fee(engine, one_hour_service):
    """R$ 50 labor + R$ 10 product sold for R$ 100 leaves a 40% margin."""
    result = engine.calculate(QuoteRequest(services=[one_hour_service]))

    assert result.commission_amount == 0.0
    assert result.payment_fee_amount == 0.0
    assert result.total_cost == pytest.approx(60.0)
    assert result.total_service_value == pytest.approx(100.0)
    assert result.final_price_with_fee == pytest.approx(100.0)
    assert result.net_profit == pytest.approx(40.0)
    assert result.profit_margin_percent == pytest.approx(40.0)


def test_total_cost_is_sum_of_components(engine, one_hour_service, apc, debit):
    second = ServiceLine(
        labor_cost_per_hour=35.0,
        execution_time_minutes=45,
        other_costs_flat=7.5,
        linked_products=[ServiceProductLink(apc, usage_per_application_ml=300)],
        price=80.0,
    )
    result = engine.calculate(QuoteRequest(
        services=[one_hour_service, second],
        other_costs_global=12.0,
        commission=CommissionTerm(AdjustmentKind.AMOUNT, 15),
        payment_method=debit,
    ))

    components = (result.total_products_cost + result.total_labor_cost + result.total_other_costs
                  + result.commission_amount + result.payment_fee_amount)
    assert result.total_cost == pytest.approx(components)
    assert result.net_profit == pytest.approx(result.total_service_value - result.total_cost)
    assert result.final_price_with_fee == pytest.approx(result.total_service_value - result.payment_fee_amount)
    assert result.total_other_costs == pytest.approx(19.5)
    assert result.total_execution_time_minutes == 105


def test_explicit_service_value_overrides_prices(engine, one_hour_service):
    result = engine.calculate(QuoteRequest(services=[one_hour_service], total_service_value=150.0))
    assert result.total_service_value == 150.0
    assert result.net_profit == pytest.approx(90.0)


def test_empty_quote(engine):
    result = engine.calculate(QuoteRequest())
    assert result.total_cost == 0.0
    assert result.net_profit == 0.0
    assert result.profit_margin_percent == 0.0


def test_zero_value_has_zero_margin(engine, one_hour_service):
    result = engine.calculate(QuoteRequest(services=[one_hour_service], total_service_value=0))
    assert result.net_profit == pytest.approx(-60.0)
    assert result.profit_margin_percent == 0.0


def test_credit_installments(engine, one_hour_service):
    credit = PaymentMethodFee(kind=PaymentKind.CREDIT, installment_rate_table={1: 2.5, 3: 5.0})

    three_x = engine.calculate(QuoteRequest(services=[one_hour_service], payment_method=credit, installments=3))
    one_x = engine.calculate(QuoteRequest(services=[one_hour_service], payment_method=credit))

    assert three_x.payment_fee_amount == pytest.approx(5.0)
    assert one_x.payment_fee_amount == pytest.approx(2.5)
    assert not three_x.warnings


def test_missing_installment_rate_warns(engine, one_hour_service):
    credit = PaymentMethodFee(kind=PaymentKind.CREDIT, installment_rate_table={1: 2.5}, name="Visa")
    result = engine.calculate(QuoteRequest(services=[one_hour_service], payment_method=credit, installments=6))

    assert result.payment_fee_amount == 0.0
    assert any("6x" in w for w in result.warnings), result.warnings


def test_zero_volume_product_warns(engine):
    broken = Product(unit_price=50, container_volume_ml=0, usage_per_application_ml=10, name="Mystery")
    service = ServiceLine(
        labor_cost_per_hour=30,
        execution_time_minutes=30,
        linked_products=[ServiceProductLink(broken, usage_per_application_ml=10)],
        price=60,
    )
    result = engine.calculate(QuoteRequest(services=[service]))

    assert result.total_products_cost == 0.0
    assert any("Mystery" in w for w in result.warnings)


def test_discount_reduces_value_before_fee(engine, one_hour_service, debit):
    """Commission is owed on the full value; the fee on what is actually paid."""
    result = engine.calculate(QuoteRequest(
        services=[one_hour_service],
        commission=CommissionTerm(AdjustmentKind.PERCENTAGE, 10),
        discount=DiscountTerm(AdjustmentKind.AMOUNT, 20),
        payment_method=debit,
    ))

    assert result.commission_amount == pytest.approx(10.0)
    assert result.discount_amount == pytest.approx(20.0)
    assert result.value_after_discount == pytest.approx(80.0)
    assert result.payment_fee_amount == pytest.approx(1.6)
    assert result.total_cost == pytest.approx(71.6)
    assert result.net_profit == pytest.approx(8.4)
    assert result.profit_margin_percent == pytest.approx(10.5)


def test_monthly_average_mode_uses_supplied_products_cost(engine, one_hour_service):
    result = engine.calculate(QuoteRequest(
        services=[one_hour_service],
        costing_mode=CostingMode.MONTHLY_AVERAGE,
        monthly_products_cost=4.0,
    ))

    assert result.costing_mode == CostingMode.MONTHLY_AVERAGE
    assert result.total_products_cost == pytest.approx(4.0)
    assert result.total_cost == pytest.approx(54.0)


def test_calculation_is_repeatable(engine, one_hour_service, debit):
    request = QuoteRequest(
        services=[one_hour_service],
        commission=CommissionTerm(AdjustmentKind.PERCENTAGE, 10),
        payment_method=debit,
    )
    first = engine.calculate(request)
    second = engine.calculate(request)

    assert first.to_summary_dict() == second.to_summary_dict()
    assert first.get_trace_text() == second.get_trace_text()
    assert one_hour_service.linked_products[0].product.usage_per_application_ml == 100.0


def test_trace_records_each_step(engine, one_hour_service, debit):
    result = engine.calculate(QuoteRequest(
        services=[one_hour_service],
        commission=CommissionTerm(AdjustmentKind.PERCENTAGE, 10),
        payment_method=debit,
    ))
    steps = [t.step for t in result.trace]

    for expected in ("Products", "Labor", "Other Costs", "Commission", "Payment Fee", "Total Cost", "Net Profit"):
        assert expected in steps, f"Missing trace step {expected}"
    assert "Net Profit" in result.get_trace_text()


def test_functional_wrapper_matches_engine(engine, one_hour_service):
    via_engine = engine.calculate(QuoteRequest(services=[one_hour_service]))
    via_function = calculate_quote_totals([one_hour_service], settings=engine.settings)
    assert via_function.total_cost == pytest.approx(via_engine.total_cost)


def test_diluted_products_in_quote(engine):
    shampoo = Product(unit_price=90, container_volume_ml=5000, dilution_ratio=100,
                      kind=ProductKind.DILUTED, usage_per_application_ml=2000)
    service = ServiceLine(labor_cost_per_hour=0,
                          linked_products=[ServiceProductLink(shampoo, usage_per_application_ml=2000)],
                          price=10)
    result = engine.calculate(QuoteRequest(services=[service]))
    assert result.total_products_cost == pytest.approx(90 / 5000 / 101 * 2000)

    stronger = replace(service, linked_products=(ServiceProductLink(shampoo, 2000, dilution_ratio=50),))
    assert engine.calculate(QuoteRequest(services=[stronger])).total_products_cost > result.total_products_cost


def test_quote_products_replace_service_products(engine, one_hour_service, apc):
    """A quote can swap the products a service consumes without touching the catalog service."""
    swapped = replace(one_hour_service, linked_products=(ServiceProductLink(apc, usage_per_application_ml=1100),))

    default = engine.calculate(QuoteRequest(services=[one_hour_service]))
    result = engine.calculate(QuoteRequest(services=[swapped]))

    assert default.total_products_cost == pytest.approx(10.0)
    assert result.total_products_cost == pytest.approx(120 / 5000 / 11 * 1100)
    assert result.total_labor_cost == pytest.approx(default.total_labor_cost)
    assert one_hour_service.linked_products[0].product.name == "Wax"


class TestSuggestedPrice:

    def test_forty_percent_margin(self):
        assert suggested_price(60.0, 40) == pytest.approx(100.0)

    def test_zero_margin_is_cost(self):
        assert suggested_price(60.0, 0) == pytest.approx(60.0)

    def test_negative_margin_prices_below_cost(self):
        assert suggested_price(60.0, -20) == pytest.approx(50.0)

    @pytest.mark.parametrize("margin", [100, 150])
    def test_margin_of_100_or_more_is_rejected(self, margin):
        with pytest.raises(InvalidMarginError) as exc:
            suggested_price(60.0, margin)
        assert exc.value.margin_percent == margin

    def test_engine_method(self, engine):
        assert engine.suggested_price(75.0, 25) == pytest.approx(100.0)
