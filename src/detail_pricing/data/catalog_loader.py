"""
Catalog Loader - Builds engine inputs from CSV catalog exports.

Reads products, services and their product links, payment methods with
installment rates, operational costs and opening hours, and produces:
- Engine value objects keyed by id
- A load report with file hashes, counts, warnings and errors
"""
import hashlib
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import Settings, get_settings
from ..engine.models import (
    PaymentMethodFee,
    Product,
    ProductKind,
    ServiceLine,
    ServiceProductLink,
)
from ..policy.models import WEEKDAYS, OperationalCost, OperationalHours

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    'products': ['product_id', 'name', 'price', 'size_l', 'type'],
    'services': ['service_id', 'name', 'price', 'labor_cost_per_hour', 'execution_time_minutes'],
    'service_products': ['service_id', 'product_id', 'usage_per_vehicle_ml'],
    'payment_methods': ['method_id', 'name', 'type'],
    'installments': ['method_id', 'installments', 'rate'],
    'operational_costs': ['description', 'value', 'type'],
    'operational_hours': ['day', 'start', 'end'],
}


@dataclass
class Catalog:
    """Everything the calculators need, loaded from the data directory."""
    products: dict[str, Product] = field(default_factory=dict)
    services: dict[str, ServiceLine] = field(default_factory=dict)
    payment_methods: dict[str, PaymentMethodFee] = field(default_factory=dict)
    operational_costs: list[OperationalCost] = field(default_factory=list)
    operational_hours: OperationalHours = field(default_factory=OperationalHours)
    report: dict = field(default_factory=dict)


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def _optional_num(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _num(value, default: float = 0.0) -> float:
    number = _optional_num(value)
    return default if number is None else number


def _text(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _read(path: Path, name: str, report: dict, required: bool = False) -> pd.DataFrame:
    """Read one CSV, recording it in the report. Missing optional files yield an empty frame."""
    if not path.exists():
        if required:
            report["errors"].append(f"{path.name} not found at {path}")
        else:
            report["warnings"].append(f"{path.name} not found; skipping {name}")
        return pd.DataFrame(columns=REQUIRED_COLUMNS[name])

    report["input_files"][name] = {"path": str(path), "hash": get_file_hash(path)}

    df = pd.read_csv(path, dtype=str)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS[name] if c not in df.columns]
    if missing:
        report["errors"].append(f"{path.name} is missing columns: {', '.join(missing)}")
        return pd.DataFrame(columns=REQUIRED_COLUMNS[name])

    for col in df.columns:
        df[col] = df[col].map(lambda v: v.strip() if isinstance(v, str) else v)
    return df


def _load_products(df: pd.DataFrame, report: dict) -> dict[str, Product]:
    products = {}
    for _, row in df.iterrows():
        product_id = _text(row['product_id'])
        if not product_id:
            report["warnings"].append("Skipped product row without product_id")
            continue
        try:
            kind = ProductKind.parse(row['type'])
        except ValueError:
            report["warnings"].append(f"Skipped product {product_id}: unknown type {row['type']!r}")
            continue

        products[product_id] = Product(
            unit_price=_num(row['price']),
            # Catalog sizes are in liters
            container_volume_ml=_num(row['size_l']) * 1000,
            dilution_ratio=max(_num(row.get('dilution_ratio')), 0.0),
            usage_per_application_ml=_num(row.get('usage_per_vehicle_ml')),
            kind=kind,
            container_size_ml=_num(row.get('container_size_ml')),
            product_id=product_id,
            name=_text(row['name']),
        )
    return products


def _load_links(df: pd.DataFrame, products: dict[str, Product], report: dict) -> dict[str, list]:
    links: dict[str, list] = {}
    for _, row in df.iterrows():
        service_id = _text(row['service_id'])
        product_id = _text(row['product_id'])
        product = products.get(product_id)
        if product is None:
            report["warnings"].append(f"Service {service_id} links unknown product {product_id}")
            continue

        ratio = _optional_num(row.get('dilution_ratio'))
        links.setdefault(service_id, []).append(ServiceProductLink(
            product=product,
            usage_per_application_ml=_num(row['usage_per_vehicle_ml']),
            dilution_ratio=max(ratio, 0.0) if ratio is not None else None,
            container_size_ml=_optional_num(row.get('container_size_ml')),
        ))
    return links


def _load_services(df: pd.DataFrame, links: dict[str, list], report: dict) -> dict[str, ServiceLine]:
    services = {}
    for _, row in df.iterrows():
        service_id = _text(row['service_id'])
        if not service_id:
            report["warnings"].append("Skipped service row without service_id")
            continue
        services[service_id] = ServiceLine(
            labor_cost_per_hour=_num(row['labor_cost_per_hour']),
            execution_time_minutes=max(_num(row['execution_time_minutes']), 0.0),
            other_costs_flat=max(_num(row.get('other_costs')), 0.0),
            linked_products=tuple(links.get(service_id, [])),
            price=_num(row['price']),
            service_id=service_id,
            name=_text(row['name']),
        )
    return services


def _load_payment_methods(methods_df: pd.DataFrame, installments_df: pd.DataFrame,
                          report: dict) -> dict[str, PaymentMethodFee]:
    tables: dict[str, dict[int, float]] = {}
    for _, row in installments_df.iterrows():
        count = _optional_num(row['installments'])
        if count is None:
            continue
        tables.setdefault(_text(row['method_id']), {})[int(count)] = _num(row['rate'])

    methods = {}
    for _, row in methods_df.iterrows():
        method_id = _text(row['method_id'])
        try:
            methods[method_id] = PaymentMethodFee(
                kind=row['type'],
                flat_rate_percent=_num(row.get('rate')),
                installment_rate_table=tables.get(method_id, {}),
                method_id=method_id,
                name=_text(row['name']),
            )
        except ValueError:
            report["warnings"].append(f"Skipped payment method {method_id}: unknown type {row['type']!r}")
    return methods


def _load_operational_costs(df: pd.DataFrame, report: dict) -> list[OperationalCost]:
    costs = []
    for _, row in df.iterrows():
        try:
            costs.append(OperationalCost(
                description=_text(row['description']) or '',
                value=_num(row['value']),
                type=_text(row['type']) or 'fixed',
            ))
        except ValueError:
            report["warnings"].append(f"Skipped operational cost {row['description']!r}: unknown type {row['type']!r}")
    return costs


def _load_operational_hours(df: pd.DataFrame, report: dict) -> OperationalHours:
    start, end = {}, {}
    for _, row in df.iterrows():
        day = (_text(row['day']) or '').lower()
        if day not in WEEKDAYS:
            report["warnings"].append(f"Unknown weekday {row['day']!r} in operational hours")
            continue
        start[day] = _text(row['start'])
        end[day] = _text(row['end'])
    return OperationalHours(start=start, end=end)


def load_catalog(settings: Optional[Settings] = None, verbose: bool = False, strict: bool = False) -> Catalog:
    """
    Load the catalog from the configured data directory.

    Args:
        settings: Optional settings override
        verbose: Print progress messages
        strict: Raise FileNotFoundError/ValueError instead of returning a failed report

    Returns:
        Catalog with its load report
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "data_dir": str(settings.data_dir),
        "input_files": {},
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    products_df = _read(settings.products_csv, 'products', report, required=True)
    services_df = _read(settings.services_csv, 'services', report, required=True)
    links_df = _read(settings.service_products_csv, 'service_products', report)
    methods_df = _read(settings.payment_methods_csv, 'payment_methods', report)
    installments_df = _read(settings.installments_csv, 'installments', report)
    costs_df = _read(settings.operational_costs_csv, 'operational_costs', report)
    hours_df = _read(settings.operational_hours_csv, 'operational_hours', report)

    products = _load_products(products_df, report)
    links = _load_links(links_df, products, report)

    catalog = Catalog(
        products=products,
        services=_load_services(services_df, links, report),
        payment_methods=_load_payment_methods(methods_df, installments_df, report),
        operational_costs=_load_operational_costs(costs_df, report),
        operational_hours=_load_operational_hours(hours_df, report),
        report=report,
    )

    report["metrics"] = {
        "products": len(catalog.products),
        "services": len(catalog.services),
        "product_links": sum(len(v) for v in links.values()),
        "payment_methods": len(catalog.payment_methods),
        "operational_costs": len(catalog.operational_costs),
    }
    report["status"] = "failed" if report["errors"] else "success"

    for warning in report["warnings"]:
        logger.warning(warning)
    for error in report["errors"]:
        logger.error(error)

    if verbose:
        print(f"Loaded {len(catalog.products)} products and {len(catalog.services)} services "
              f"from {settings.data_dir}")

    if strict and report["errors"]:
        message = "; ".join(report["errors"])
        if any("not found" in e for e in report["errors"]):
            raise FileNotFoundError(message)
        raise ValueError(message)

    return catalog
