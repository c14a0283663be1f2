"""Engine subpackage - core cost, price and margin calculations."""
from .adjustments import commission_amount, discount_amount
from .errors import InvalidMarginError, PricingError
from .models import (
    AdjustmentKind,
    CommissionTerm,
    CostingMode,
    DilutionSplit,
    DiscountTerm,
    PaymentKind,
    PaymentMethodFee,
    Product,
    ProductKind,
    QuoteRequest,
    QuoteTotals,
    ServiceLine,
    ServiceProductLink,
    ServiceProfitability,
)
from .payment_fees import available_installments, payment_fee
from .product_costs import (
    concentrate_per_application,
    cost_per_application,
    cost_per_container,
    cost_per_liter,
    dilution_split,
    split_by_parts,
)
from .quote_engine import QuoteEngine, calculate_quote_totals, suggested_price
from .service_costs import (
    labor_cost,
    products_cost,
    profitability_per_hour,
    service_cost,
    service_profitability,
)

__all__ = [
    'QuoteEngine', 'calculate_quote_totals', 'suggested_price', 'profitability_per_hour',
    'Product', 'ProductKind', 'ServiceLine', 'ServiceProductLink',
    'CommissionTerm', 'DiscountTerm', 'AdjustmentKind',
    'PaymentMethodFee', 'PaymentKind', 'CostingMode',
    'QuoteRequest', 'QuoteTotals', 'ServiceProfitability', 'DilutionSplit',
    'cost_per_application', 'cost_per_container', 'cost_per_liter',
    'concentrate_per_application', 'dilution_split', 'split_by_parts',
    'labor_cost', 'products_cost', 'service_cost', 'service_profitability',
    'commission_amount', 'discount_amount', 'payment_fee', 'available_installments',
    'InvalidMarginError', 'PricingError',
]
