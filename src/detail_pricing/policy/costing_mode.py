"""
Costing Mode Resolver - Decides how product consumption is costed.

If the operational costs include a monthly "products spent" entry, product
consumption is already part of the monthly overhead and quotes use the
monthly-average mode. Otherwise each service carries its own product cost.
"""
from typing import Iterable, Optional

from ..config.settings import Settings, get_settings
from ..engine.models import CostingMode
from .models import OperationalCost


class CostingModeResolver:
    """Resolves the CostingMode from the operational cost list."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def find_products_cost(self, costs: Iterable[OperationalCost]) -> Optional[OperationalCost]:
        """Return the monthly products-spent entry, if configured."""
        label = self.settings.monthly_products_cost_label.strip().casefold()
        for cost in costs:
            if cost.description.strip().casefold() == label:
                return cost
        return None

    def resolve(self, costs: Iterable[OperationalCost]) -> CostingMode:
        if self.find_products_cost(costs) is not None:
            return CostingMode.MONTHLY_AVERAGE
        return CostingMode.PER_SERVICE
