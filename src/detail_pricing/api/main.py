import logging
from dataclasses import asdict, replace
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from detail_pricing import __version__
from detail_pricing.api.state import engine, get_catalog, reload_catalog
from detail_pricing.engine import (
    CommissionTerm,
    DiscountTerm,
    InvalidMarginError,
    PricingError,
    QuoteRequest,
    ServiceProductLink,
    cost_per_application,
    cost_per_container,
    dilution_split,
)
from detail_pricing.engine.payment_fees import available_installments
from detail_pricing.policy.costing_mode import CostingModeResolver
from detail_pricing.policy.hourly_cost import calculate_hourly_cost
from detail_pricing.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Detail Pricing API",
    description="Quote cost, price and margin calculations for detailing services",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class Adjustment(BaseModel):
    kind: Literal["amount", "percentage"] = "amount"
    value: float = Field(0.0, ge=0)


class QuotedProduct(BaseModel):
    product_id: str
    usage_per_application_ml: float = Field(..., ge=0)
    dilution_ratio: Optional[float] = Field(None, ge=0)
    container_size_ml: Optional[float] = Field(None, ge=0)


class QuotedService(BaseModel):
    """A catalog service with optional per-quote overrides."""
    service_id: str
    price: Optional[float] = Field(None, ge=0)
    execution_time_minutes: Optional[float] = Field(None, ge=0)
    labor_cost_per_hour: Optional[float] = Field(None, ge=0)
    other_costs: Optional[float] = Field(None, ge=0)
    # Replaces the catalog products of the service when given
    products: Optional[List[QuotedProduct]] = None


class QuoteCalcRequest(BaseModel):
    services: List[QuotedService]
    other_costs_global: float = Field(0.0, ge=0)
    commission: Optional[Adjustment] = None
    discount: Optional[Adjustment] = None
    payment_method_id: Optional[str] = None
    installments: Optional[int] = Field(None, ge=1)
    total_service_value: Optional[float] = Field(None, ge=0)
    monthly_products_cost: float = Field(0.0, ge=0)


class SuggestedPriceRequest(BaseModel):
    total_cost: float = Field(..., ge=0)
    desired_margin_percent: float


def _resolve_link(catalog, quoted: QuotedProduct) -> ServiceProductLink:
    product = catalog.products.get(quoted.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Unknown product: {quoted.product_id}")
    return ServiceProductLink(
        product=product,
        usage_per_application_ml=quoted.usage_per_application_ml,
        dilution_ratio=quoted.dilution_ratio,
        container_size_ml=quoted.container_size_ml,
    )


def _build_quote_request(req: QuoteCalcRequest) -> QuoteRequest:
    catalog = get_catalog()

    services = []
    for quoted in req.services:
        service = catalog.services.get(quoted.service_id)
        if service is None:
            raise HTTPException(status_code=404, detail=f"Unknown service: {quoted.service_id}")
        overrides = {}
        if quoted.price is not None:
            overrides['price'] = quoted.price
        if quoted.execution_time_minutes is not None:
            overrides['execution_time_minutes'] = quoted.execution_time_minutes
        if quoted.labor_cost_per_hour is not None:
            overrides['labor_cost_per_hour'] = quoted.labor_cost_per_hour
        if quoted.other_costs is not None:
            overrides['other_costs_flat'] = quoted.other_costs
        if quoted.products is not None:
            overrides['linked_products'] = tuple(_resolve_link(catalog, p) for p in quoted.products)
        services.append(replace(service, **overrides))

    payment_method = None
    if req.payment_method_id:
        payment_method = catalog.payment_methods.get(req.payment_method_id)
        if payment_method is None:
            raise HTTPException(status_code=404, detail=f"Unknown payment method: {req.payment_method_id}")

    return QuoteRequest(
        services=tuple(services),
        other_costs_global=req.other_costs_global,
        commission=CommissionTerm(req.commission.kind, req.commission.value) if req.commission else None,
        discount=DiscountTerm(req.discount.kind, req.discount.value) if req.discount else None,
        payment_method=payment_method,
        installments=req.installments,
        total_service_value=req.total_service_value,
        costing_mode=CostingModeResolver().resolve(catalog.operational_costs),
        monthly_products_cost=req.monthly_products_cost,
    )


@app.get("/")
async def root():
    return {"status": "online", "message": "Detail Pricing API Active"}


@app.post("/quote/calculate")
async def calculate_quote(req: QuoteCalcRequest):
    request = _build_quote_request(req)
    try:
        result = engine.calculate(request)
        return jsonable_encoder(result)
    except PricingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Quote calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/quote/suggested-price")
async def get_suggested_price(req: SuggestedPriceRequest):
    try:
        price = engine.suggested_price(req.total_cost, req.desired_margin_percent)
    except InvalidMarginError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "total_cost": req.total_cost,
        "desired_margin_percent": req.desired_margin_percent,
        "suggested_price": price,
    }


@app.get("/catalog/products")
async def get_products(search: Optional[str] = None):
    catalog = get_catalog()
    result = {}
    for product_id, product in catalog.products.items():
        if search and search.lower() not in (product.name or product_id).lower():
            continue
        data = jsonable_encoder(product)
        data['cost_per_application'] = cost_per_application(product)
        data['cost_per_container'] = cost_per_container(product)
        data['dilution_split'] = asdict(dilution_split(product))
        result[product_id] = data
    return result


@app.get("/catalog/services")
async def get_services():
    catalog = get_catalog()
    mode = CostingModeResolver().resolve(catalog.operational_costs)
    return {
        service_id: {
            "name": service.name,
            "price": service.price,
            "execution_time_minutes": service.execution_time_minutes,
            "profitability": jsonable_encoder(engine.service_breakdown(service, mode)),
        }
        for service_id, service in catalog.services.items()
    }


@app.get("/catalog/payment-methods")
async def get_payment_methods():
    catalog = get_catalog()
    return {
        method_id: {
            "name": method.name,
            "kind": method.kind.value,
            "flat_rate_percent": method.flat_rate_percent,
            "installments": available_installments(method),
        }
        for method_id, method in catalog.payment_methods.items()
    }


@app.get("/costs/hourly")
async def get_hourly_cost():
    catalog = get_catalog()
    breakdown = calculate_hourly_cost(catalog.operational_costs, catalog.operational_hours)
    return asdict(breakdown)


@app.post("/system/reload")
async def reload_data():
    try:
        catalog = reload_catalog()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": catalog.report.get("status"), "metrics": catalog.report.get("metrics")}


@app.get("/system/status")
async def get_status():
    catalog = get_catalog()
    report = catalog.report
    return {
        "engine_active": True,
        "catalog_status": report.get("status"),
        "metrics": report.get("metrics", {}),
        "warnings": report.get("warnings", []),
        "errors": report.get("errors", []),
        "costing_mode": CostingModeResolver().resolve(catalog.operational_costs).value,
        "catalog_loaded_at": report.get("timestamp"),
    }
