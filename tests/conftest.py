import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from detail_pricing.config.settings import Settings
from detail_pricing.engine import (
    Product,
    ProductKind,
    QuoteEngine,
    ServiceLine,
    ServiceProductLink,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SAMPLE_DATA_DIR = PROJECT_ROOT / 'data'


@pytest.fixture
def settings():
    return Settings.load(project_root=PROJECT_ROOT, data_dir=SAMPLE_DATA_DIR)


@pytest.fixture
def engine(settings):
    return QuoteEngine(settings)


@pytest.fixture
def wax():
    """Ready-to-use wax: R$ 100 per liter, 100 ml per car -> R$ 10 per application."""
    return Product(
        unit_price=100.0,
        container_volume_ml=1000.0,
        usage_per_application_ml=100.0,
        kind=ProductKind.READY_TO_USE,
        name="Wax",
    )


@pytest.fixture
def apc():
    """All purpose cleaner concentrate, 5 L for R$ 120, diluted 1:10."""
    return Product(
        unit_price=120.0,
        container_volume_ml=5000.0,
        dilution_ratio=10.0,
        usage_per_application_ml=500.0,
        kind=ProductKind.DILUTED,
        container_size_ml=1000.0,
        name="APC",
    )


@pytest.fixture
def one_hour_service(wax):
    """One hour at R$ 50/h with one R$ 10 product application."""
    return ServiceLine(
        labor_cost_per_hour=50.0,
        execution_time_minutes=60,
        other_costs_flat=0.0,
        linked_products=(ServiceProductLink(wax, usage_per_application_ml=100.0),),
        price=100.0,
        name="Wash",
    )
