"""
Quote Engine - Assembles quote totals with traceability.

Combines product, labor, flat, commission, discount and payment-fee figures
into a single QuoteTotals:
- Commission and discount are computed on the full service value
- The payment fee is charged on the value after discount
- Commission and fee are costs, not deductions from revenue
- Every step is recorded on the result trace
"""
import logging
from typing import Optional

from ..config.settings import Settings, get_settings
from .adjustments import commission_amount, discount_amount
from .errors import InvalidMarginError
from .models import (
    AdjustmentKind,
    CommissionTerm,
    CostingMode,
    PaymentKind,
    PaymentMethodFee,
    ProductKind,
    QuoteRequest,
    QuoteTotals,
    ServiceLine,
    ServiceProfitability,
)
from .payment_fees import installment_rate, payment_fee
from .service_costs import (
    labor_cost,
    products_cost,
    profitability_per_hour,
    service_profitability,
)

logger = logging.getLogger(__name__)


def suggested_price(total_cost: float, desired_margin_percent: float) -> float:
    """
    Price that leaves `desired_margin_percent` of it as profit over `total_cost`.

    Raises InvalidMarginError for margins of 100% or more.
    """
    if desired_margin_percent >= 100:
        raise InvalidMarginError(desired_margin_percent)
    return total_cost / (1 - desired_margin_percent / 100)


class QuoteEngine:
    """
    Stateless quote calculator.

    Settings only affect how figures are rendered in the trace; the numbers
    themselves depend on the request alone.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _money(self, value: float) -> str:
        return f"{self.settings.currency_symbol} {value:.2f}"

    def calculate(self, request: QuoteRequest) -> QuoteTotals:
        """
        Calculate quote totals with full traceability.

        Args:
            request: QuoteRequest with services, terms and payment selection

        Returns:
            QuoteTotals with figures, trace and warnings
        """
        result = QuoteTotals(costing_mode=request.costing_mode)
        self._check_inputs(request, result)

        # 1. Products
        if request.costing_mode == CostingMode.PER_SERVICE:
            result.total_products_cost = sum(
                products_cost(s, CostingMode.PER_SERVICE) for s in request.services
            )
            result.add_trace("Products", "Per-service product consumption",
                             self._money(result.total_products_cost))
        else:
            result.total_products_cost = float(request.monthly_products_cost)
            result.add_trace("Products", "Monthly-average product cost supplied by caller",
                             self._money(result.total_products_cost))

        # 2. Labor
        result.total_labor_cost = sum(labor_cost(s) for s in request.services)
        result.total_execution_time_minutes = sum(s.execution_time_minutes for s in request.services)
        result.add_trace("Labor", f"{result.total_execution_time_minutes:g} min of labor",
                         self._money(result.total_labor_cost))

        # 3. Flat costs
        result.total_other_costs = (
            sum(s.other_costs_flat for s in request.services) + request.other_costs_global
        )
        result.add_trace("Other Costs", "Service flat costs + global costs",
                         self._money(result.total_other_costs))

        # 4. Commission on the pre-discount value
        result.total_service_value = request.resolve_service_value()
        result.commission_amount = commission_amount(request.commission, result.total_service_value)
        if result.commission_amount:
            result.add_trace("Commission", self._describe_commission(request.commission),
                             self._money(result.commission_amount))

        # 5. Discount
        result.discount_amount = discount_amount(request.discount, result.total_service_value)
        result.value_after_discount = result.total_service_value - result.discount_amount
        if result.discount_amount:
            result.add_trace("Discount", f"Service value {self._money(result.total_service_value)} discounted",
                             self._money(result.value_after_discount))

        # 6. Payment fee on what the customer actually pays
        result.payment_fee_amount = payment_fee(
            request.payment_method, result.value_after_discount, request.installments
        )
        if result.payment_fee_amount:
            result.add_trace("Payment Fee", self._describe_payment(request),
                             self._money(result.payment_fee_amount))

        # 7. Totals
        result.total_cost = (
            result.total_products_cost
            + result.total_labor_cost
            + result.total_other_costs
            + result.commission_amount
            + result.payment_fee_amount
        )
        result.final_price_with_fee = result.value_after_discount - result.payment_fee_amount
        result.net_profit = result.value_after_discount - result.total_cost
        if result.value_after_discount > 0:
            result.profit_margin_percent = (result.net_profit / result.value_after_discount) * 100
        else:
            result.profit_margin_percent = 0.0

        result.add_trace("Total Cost", "Products + labor + other + commission + fee",
                         self._money(result.total_cost))
        result.add_trace("Net Profit", f"Margin {result.profit_margin_percent:.2f}%",
                         self._money(result.net_profit))

        logger.debug(
            "Quote calculated: %d services, value=%.2f cost=%.2f profit=%.2f",
            len(request.services), result.total_service_value,
            result.total_cost, result.net_profit
        )
        return result

    def service_breakdown(
        self,
        service: ServiceLine,
        mode: CostingMode = CostingMode.PER_SERVICE
    ) -> ServiceProfitability:
        return service_profitability(service, mode)

    def suggested_price(self, total_cost: float, desired_margin_percent: float) -> float:
        return suggested_price(total_cost, desired_margin_percent)

    def profitability_per_hour(self, net_profit: float, execution_time_minutes: float) -> float:
        return profitability_per_hour(net_profit, execution_time_minutes)

    def _check_inputs(self, request: QuoteRequest, result: QuoteTotals):
        """Record warnings for inputs that silently contribute zero."""
        if request.costing_mode == CostingMode.PER_SERVICE:
            for service in request.services:
                for link in service.linked_products:
                    product = link.resolved()
                    label = product.name or product.product_id or "product"
                    if product.container_volume_ml <= 0:
                        result.add_warning(f"{label} has no container volume; cost counted as zero")
                    elif product.kind == ProductKind.DILUTED and product.dilution_ratio <= 0:
                        result.add_warning(f"{label} is diluted but has no dilution ratio; cost counted as zero")

        method = request.payment_method
        if method is not None and method.kind == PaymentKind.CREDIT:
            if installment_rate(method, request.installments) is None:
                count = request.installments or 1
                result.add_warning(f"No rate configured for {count}x on {method.name or 'credit card'}; fee counted as zero")

        for warning in result.warnings:
            logger.warning(warning)

    def _describe_commission(self, term: CommissionTerm) -> str:
        if term.kind == AdjustmentKind.PERCENTAGE:
            return f"{term.value:g}% of service value"
        return "Flat commission"

    def _describe_payment(self, request: QuoteRequest) -> str:
        method: PaymentMethodFee = request.payment_method
        label = method.name or method.kind.value
        if method.kind == PaymentKind.CREDIT:
            return f"{label} in {request.installments or 1}x"
        return label


def calculate_quote_totals(
    services,
    total_service_value: Optional[float] = None,
    other_costs_global: float = 0.0,
    commission: Optional[CommissionTerm] = None,
    payment_method: Optional[PaymentMethodFee] = None,
    installments: Optional[int] = None,
    costing_mode: CostingMode = CostingMode.PER_SERVICE,
    monthly_products_cost: float = 0.0,
    discount=None,
    settings: Optional[Settings] = None,
) -> QuoteTotals:
    """Functional shortcut around QuoteEngine.calculate."""
    request = QuoteRequest(
        services=tuple(services),
        other_costs_global=other_costs_global,
        commission=commission,
        payment_method=payment_method,
        installments=installments,
        discount=discount,
        total_service_value=total_service_value,
        costing_mode=costing_mode,
        monthly_products_cost=monthly_products_cost,
    )
    return QuoteEngine(settings).calculate(request)
