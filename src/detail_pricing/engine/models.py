"""
Data models for the pricing engine.

Inputs are frozen dataclasses built by the caller from whatever store it uses;
the engine never mutates them. Outputs carry a trace of every calculation step.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping, Optional


class ProductKind(str, Enum):
    DILUTED = "diluted"
    READY_TO_USE = "ready_to_use"

    @classmethod
    def parse(cls, value: str) -> 'ProductKind':
        """Accept both the enum value and the catalog spelling ("ready-to-use")."""
        normalized = str(value).strip().lower().replace('-', '_')
        return cls(normalized)


class AdjustmentKind(str, Enum):
    AMOUNT = "amount"
    PERCENTAGE = "percentage"


class PaymentKind(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"
    NONE = "none"

    @classmethod
    def parse(cls, value: str) -> 'PaymentKind':
        """Map payment method labels from the catalog onto a fee kind."""
        normalized = str(value).strip().lower()
        aliases = {
            'debit_card': cls.DEBIT,
            'credit_card': cls.CREDIT,
            'cash': cls.NONE,
            'pix': cls.NONE,
        }
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class CostingMode(str, Enum):
    PER_SERVICE = "per-service"
    MONTHLY_AVERAGE = "monthly-average"


@dataclass(frozen=True)
class Product:
    """A catalog product as used by one application."""
    unit_price: float
    container_volume_ml: float
    dilution_ratio: float = 0.0  # 10 means 1:10
    usage_per_application_ml: float = 0.0
    kind: ProductKind = ProductKind.READY_TO_USE
    container_size_ml: float = 0.0  # spray bottle / bucket the mixture goes into
    product_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.kind, ProductKind):
            object.__setattr__(self, 'kind', ProductKind.parse(self.kind))

    @property
    def is_diluted(self) -> bool:
        return self.kind == ProductKind.DILUTED and self.dilution_ratio > 0


@dataclass(frozen=True)
class ServiceProductLink:
    """A product linked to a service, with per-service usage and overrides."""
    product: Product
    usage_per_application_ml: float
    dilution_ratio: Optional[float] = None
    container_size_ml: Optional[float] = None

    def resolved(self) -> Product:
        """Return the product with this link's usage and overrides applied."""
        changes = {'usage_per_application_ml': self.usage_per_application_ml}
        if self.dilution_ratio is not None:
            changes['dilution_ratio'] = self.dilution_ratio
        if self.container_size_ml is not None:
            changes['container_size_ml'] = self.container_size_ml
        return replace(self.product, **changes)


@dataclass(frozen=True)
class ServiceLine:
    """One service execution in a quote."""
    labor_cost_per_hour: float
    execution_time_minutes: float = 0.0
    other_costs_flat: float = 0.0
    linked_products: tuple[ServiceProductLink, ...] = ()
    price: float = 0.0
    service_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        # Lists are accepted for convenience but stored as a tuple
        if not isinstance(self.linked_products, tuple):
            object.__setattr__(self, 'linked_products', tuple(self.linked_products))


@dataclass(frozen=True)
class CommissionTerm:
    kind: AdjustmentKind = AdjustmentKind.AMOUNT
    value: float = 0.0

    def __post_init__(self):
        if not isinstance(self.kind, AdjustmentKind):
            object.__setattr__(self, 'kind', AdjustmentKind(self.kind))


@dataclass(frozen=True)
class DiscountTerm:
    kind: AdjustmentKind = AdjustmentKind.AMOUNT
    value: float = 0.0

    def __post_init__(self):
        if not isinstance(self.kind, AdjustmentKind):
            object.__setattr__(self, 'kind', AdjustmentKind(self.kind))


@dataclass(frozen=True)
class PaymentMethodFee:
    """Fee schedule of a payment method."""
    kind: PaymentKind = PaymentKind.NONE
    flat_rate_percent: float = 0.0
    installment_rate_table: Mapping[int, float] = field(default_factory=dict)
    method_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.kind, PaymentKind):
            object.__setattr__(self, 'kind', PaymentKind.parse(self.kind))


@dataclass(frozen=True)
class QuoteRequest:
    """Everything the totals assembler needs for one quote or sale."""
    services: tuple[ServiceLine, ...] = ()
    other_costs_global: float = 0.0
    commission: Optional[CommissionTerm] = None
    payment_method: Optional[PaymentMethodFee] = None
    installments: Optional[int] = None
    discount: Optional[DiscountTerm] = None
    # Charged value; falls back to the sum of service prices
    total_service_value: Optional[float] = None
    costing_mode: CostingMode = CostingMode.PER_SERVICE
    monthly_products_cost: float = 0.0

    def __post_init__(self):
        if not isinstance(self.services, tuple):
            object.__setattr__(self, 'services', tuple(self.services))

    def resolve_service_value(self) -> float:
        if self.total_service_value is not None:
            return float(self.total_service_value)
        return sum(s.price for s in self.services)


@dataclass(frozen=True)
class DilutionSplit:
    concentrate_ml: float
    water_ml: float


@dataclass
class TraceStep:
    """A single step in the calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class ServiceProfitability:
    """Cost and margin breakdown of a single service at its own price."""
    labor_cost: float
    products_cost: float
    other_costs: float
    total_cost: float
    charged_value: float
    net_profit: float
    profit_margin_percent: float
    profitability_per_hour: float
    service_id: Optional[str] = None
    name: Optional[str] = None


@dataclass
class QuoteTotals:
    """Complete result of a quote calculation."""
    total_products_cost: float = 0.0
    total_labor_cost: float = 0.0
    total_other_costs: float = 0.0
    commission_amount: float = 0.0
    payment_fee_amount: float = 0.0
    total_cost: float = 0.0
    total_service_value: float = 0.0
    final_price_with_fee: float = 0.0
    net_profit: float = 0.0
    profit_margin_percent: float = 0.0

    discount_amount: float = 0.0
    value_after_discount: float = 0.0
    total_execution_time_minutes: float = 0.0
    costing_mode: CostingMode = CostingMode.PER_SERVICE

    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the result-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_summary_dict(self) -> dict:
        """Flat dict of the money/percent figures, for tables and exports."""
        return {
            "Products": self.total_products_cost,
            "Labor": self.total_labor_cost,
            "Other Costs": self.total_other_costs,
            "Commission": self.commission_amount,
            "Payment Fee": self.payment_fee_amount,
            "Total Cost": self.total_cost,
            "Service Value": self.total_service_value,
            "Discount": self.discount_amount,
            "Received": self.final_price_with_fee,
            "Net Profit": self.net_profit,
            "Margin %": self.profit_margin_percent,
        }
