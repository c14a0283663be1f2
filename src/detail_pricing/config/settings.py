"""
Centralized settings and path configuration for detail pricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DATA_DIR_ENV = 'DETAIL_PRICING_DATA_DIR'


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Catalog files
    products_csv: Path
    services_csv: Path
    service_products_csv: Path
    payment_methods_csv: Path
    installments_csv: Path
    operational_costs_csv: Path
    operational_hours_csv: Path

    # Operational cost whose presence switches products to monthly-average costing
    monthly_products_cost_label: str = 'Produtos Gastos no Mês'

    # Display
    currency_symbol: str = 'R$'

    # Hourly overhead assumptions
    weeks_per_month: int = 4
    lunch_break_minutes: int = 60

    @classmethod
    def load(cls, project_root: Optional[Path] = None, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        if data_dir is None:
            env_dir = os.environ.get(DATA_DIR_ENV)
            data_dir = Path(env_dir) if env_dir else root / 'data'
        data_dir = Path(data_dir)

        return cls(
            project_root=root,
            data_dir=data_dir,
            products_csv=data_dir / 'products.csv',
            services_csv=data_dir / 'services.csv',
            service_products_csv=data_dir / 'service_products.csv',
            payment_methods_csv=data_dir / 'payment_methods.csv',
            installments_csv=data_dir / 'payment_method_installments.csv',
            operational_costs_csv=data_dir / 'operational_costs.csv',
            operational_hours_csv=data_dir / 'operational_hours.csv',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
