"""Shared engine and catalog instances for the API routes."""
import logging
from typing import Optional

from ..config.settings import get_settings
from ..data.catalog_loader import Catalog, load_catalog
from ..engine import QuoteEngine

logger = logging.getLogger(__name__)

engine = QuoteEngine()

_catalog: Optional[Catalog] = None


def get_catalog() -> Catalog:
    """Load the catalog on first use and keep it for the process lifetime."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog(get_settings())
        logger.info("Catalog loaded: %s", _catalog.report.get("metrics"))
    return _catalog


def reload_catalog() -> Catalog:
    global _catalog
    _catalog = None
    return get_catalog()
