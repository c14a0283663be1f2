"""
Product cost calculations.

A dilution ratio of N means 1 part concentrate to N parts water, so one ml of
concentrate yields N + 1 ml of mixture. The same convention drives both the
cost figures and the container split.
"""
from .models import DilutionSplit, Product, ProductKind


def _cost_per_ml_of_mixture(product: Product) -> float:
    """Cost of one ml of the product as applied (diluted mixture or neat)."""
    if product.container_volume_ml <= 0:
        return 0.0

    cost_per_ml = product.unit_price / product.container_volume_ml

    if product.kind == ProductKind.READY_TO_USE:
        return cost_per_ml
    elif product.kind == ProductKind.DILUTED:
        if not product.is_diluted:
            return 0.0
        return cost_per_ml / (product.dilution_ratio + 1)

    raise ValueError(f"Unknown product kind: {product.kind!r}")


def cost_per_application(product: Product) -> float:
    """Cost of the mixture used on one service execution."""
    return _cost_per_ml_of_mixture(product) * product.usage_per_application_ml


def cost_per_container(product: Product) -> float:
    """Cost of filling one container with the diluted mixture."""
    if not product.is_diluted or product.container_size_ml <= 0:
        return 0.0
    return _cost_per_ml_of_mixture(product) * product.container_size_ml


def cost_per_liter(product: Product) -> float:
    """Cost of one liter of the product as applied."""
    return _cost_per_ml_of_mixture(product) * 1000


def concentrate_per_application(product: Product) -> float:
    """Ml of concentrate consumed by one application."""
    if product.kind == ProductKind.READY_TO_USE:
        return product.usage_per_application_ml
    if not product.is_diluted:
        return 0.0
    return product.usage_per_application_ml / (product.dilution_ratio + 1)


def dilution_split(product: Product) -> DilutionSplit:
    """Concentrate and water needed to fill the product's container."""
    size = product.container_size_ml
    if size <= 0:
        return DilutionSplit(concentrate_ml=0.0, water_ml=0.0)
    if product.kind == ProductKind.READY_TO_USE:
        return DilutionSplit(concentrate_ml=size, water_ml=0.0)
    if not product.is_diluted:
        return DilutionSplit(concentrate_ml=0.0, water_ml=0.0)

    concentrate = size / (product.dilution_ratio + 1)
    return DilutionSplit(concentrate_ml=concentrate, water_ml=max(size - concentrate, 0.0))


def split_by_parts(container_ml: float, product_parts: float, water_parts: float) -> DilutionSplit:
    """
    Split a container by explicit parts, e.g. 1 product : 4 water.

    Returns a zero split when the container or the parts are not positive.
    """
    total_parts = product_parts + water_parts
    if container_ml <= 0 or product_parts < 0 or water_parts < 0 or total_parts <= 0:
        return DilutionSplit(concentrate_ml=0.0, water_ml=0.0)

    one_part = container_ml / total_parts
    return DilutionSplit(concentrate_ml=one_part * product_parts, water_ml=one_part * water_parts)


def format_dilution_ratio(ratio: float) -> str:
    if ratio > 0:
        return f"1:{ratio:g}"
    return "N/A"
