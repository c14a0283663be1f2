"""
Service cost aggregation.

Labor, product and flat costs of a single service execution.
"""
from .models import CostingMode, ServiceLine, ServiceProfitability
from .product_costs import cost_per_application


def labor_cost(service: ServiceLine) -> float:
    return (service.execution_time_minutes / 60) * service.labor_cost_per_hour


def products_cost(service: ServiceLine, mode: CostingMode = CostingMode.PER_SERVICE) -> float:
    """
    Sum of product costs for one execution.

    Only counted in per-service mode; in monthly-average mode product
    consumption is accounted for outside the service.
    """
    if mode != CostingMode.PER_SERVICE:
        return 0.0
    return sum(cost_per_application(link.resolved()) for link in service.linked_products)


def service_cost(service: ServiceLine, mode: CostingMode = CostingMode.PER_SERVICE) -> float:
    return labor_cost(service) + products_cost(service, mode) + service.other_costs_flat


def profitability_per_hour(net_profit: float, execution_time_minutes: float) -> float:
    """Net profit per hour of execution; 0 when no time is booked."""
    if execution_time_minutes <= 0:
        return 0.0
    return net_profit / (execution_time_minutes / 60)


def service_profitability(
    service: ServiceLine,
    mode: CostingMode = CostingMode.PER_SERVICE
) -> ServiceProfitability:
    """Break down cost and margin of a service charged at its own price."""
    labor = labor_cost(service)
    products = products_cost(service, mode)
    total = labor + products + service.other_costs_flat
    net_profit = service.price - total
    margin = (net_profit / service.price) * 100 if service.price > 0 else 0.0

    return ServiceProfitability(
        labor_cost=labor,
        products_cost=products,
        other_costs=service.other_costs_flat,
        total_cost=total,
        charged_value=service.price,
        net_profit=net_profit,
        profit_margin_percent=margin,
        profitability_per_hour=profitability_per_hour(net_profit, service.execution_time_minutes),
        service_id=service.service_id,
        name=service.name,
    )
