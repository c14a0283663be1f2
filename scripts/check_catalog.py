#!/usr/bin/env python
"""
Check pipeline - loads the catalog, prints service margins and runs the tests.

Usage:
    python scripts/check_catalog.py
"""
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from detail_pricing.data.catalog_loader import load_catalog
from detail_pricing.engine import QuoteEngine
from detail_pricing.policy.costing_mode import CostingModeResolver
from detail_pricing.policy.hourly_cost import calculate_hourly_cost
from detail_pricing.utils.formatting import format_currency


def main():
    print("=" * 60)
    print("DETAIL PRICING CATALOG CHECK")
    print("=" * 60)
    print()
    
    print("[1/2] Loading catalog...")
    catalog = load_catalog(verbose=True)
    report = catalog.report
    
    if report["status"] != "success":
        print("\n❌ LOAD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)
    
    for warning in report["warnings"]:
        print(f"  WARNING: {warning}")
    
    print()
    print("[2/2] Running tests...")
    
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-q', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )
    
    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)
    
    engine = QuoteEngine()
    mode = CostingModeResolver().resolve(catalog.operational_costs)
    hourly = calculate_hourly_cost(catalog.operational_costs, catalog.operational_hours)
    
    print()
    print("=" * 60)
    print("✅ CHECK COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Products: {report['metrics']['products']}")
    print(f"  Services: {report['metrics']['services']}")
    print(f"  Costing mode: {mode.value}")
    print(f"  Hourly overhead: {format_currency(hourly.hourly_cost)}")
    print()
    print("Service Margins:")
    for service in catalog.services.values():
        breakdown = engine.service_breakdown(service, mode)
        print(f"  {service.name}: {format_currency(breakdown.net_profit)} "
              f"({breakdown.profit_margin_percent:.1f}%)")


if __name__ == "__main__":
    main()
