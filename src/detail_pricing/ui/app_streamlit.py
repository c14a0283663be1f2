"""
Streamlit UI for Detail Pricing.

Features:
- Quote builder with per-quote price/time overrides
- Commission, discount and payment-method fees
- Product catalog with dilution costs
- Tools: dilution split and suggested price
- Catalog load status
"""
import streamlit as st
import pandas as pd
import sys
from dataclasses import replace
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from detail_pricing.config.settings import get_settings
from detail_pricing.data.catalog_loader import load_catalog
from detail_pricing.engine import (
    AdjustmentKind,
    CommissionTerm,
    DiscountTerm,
    InvalidMarginError,
    QuoteEngine,
    QuoteRequest,
    ServiceProductLink,
    available_installments,
    cost_per_application,
    cost_per_container,
    dilution_split,
    split_by_parts,
)
from detail_pricing.engine.models import CostingMode, PaymentKind
from detail_pricing.engine.product_costs import format_dilution_ratio
from detail_pricing.policy.costing_mode import CostingModeResolver
from detail_pricing.policy.hourly_cost import calculate_hourly_cost
from detail_pricing.utils.formatting import format_currency, format_minutes_hhmm, parse_decimal_input
from detail_pricing.utils.logger import setup_logging


st.set_page_config(
    page_title="Detail Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)

setup_logging()


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return QuoteEngine()


@st.cache_resource
def get_catalog():
    """Get cached catalog."""
    return load_catalog(get_settings())


try:
    engine = get_engine()
    catalog = get_catalog()
    settings = get_settings()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


def money(value: float) -> str:
    return format_currency(value, settings.currency_symbol)


def product_label(product_id, product) -> str:
    return f"{product.name or product_id} ({product_id})"


def optional_number(value):
    """Editor cells come back as NaN/None when left empty."""
    if value is None or pd.isna(value):
        return None
    return float(value)


costing_mode = CostingModeResolver(settings).resolve(catalog.operational_costs)


# ============================================================================
# SIDEBAR: Business Context
# ============================================================================
with st.sidebar:
    st.header("🏢 Business Context")

    with st.container(border=True):
        st.markdown("**Product costing:**")
        if costing_mode == CostingMode.MONTHLY_AVERAGE:
            st.markdown(":orange[**Monthly average**]")
            st.caption(f"'{settings.monthly_products_cost_label}' is part of the monthly costs.")
        else:
            st.markdown(":blue[**Per service**]")

    hourly = calculate_hourly_cost(catalog.operational_costs, catalog.operational_hours, settings)
    with st.expander("⏱️ Hourly Overhead"):
        st.metric("Cost per hour", money(hourly.hourly_cost))
        st.caption(f"Monthly expenses: {money(hourly.total_monthly_expenses)}")
        st.caption(f"{hourly.working_days_per_month} working days, "
                   f"{hourly.average_daily_working_hours:.1f}h net per day")

    st.divider()

    if catalog.report.get("status") == "success":
        st.success(f"📦 **{len(catalog.services)} services, {len(catalog.products)} products**")
    else:
        st.warning("⚠️ Catalog loaded with errors")


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Detail Pricing")
st.caption(f"Quote Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3, tab4 = st.tabs(["⚡ Quote Builder", "📚 Catalog", "🧪 Tools", "📊 System"])


# ============================================================================
# TAB 1: QUOTE BUILDER
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.8, 1.2], gap="large")

    with col1:
        st.subheader("Services")
        labels = {f"{s.name} | {money(s.price)}": sid for sid, s in catalog.services.items()}
        selected = st.multiselect("Services", options=list(labels), label_visibility="collapsed",
                                  placeholder="Choose the services for this quote...")
        selected_ids = [labels[label] for label in selected]

        quoted_services = []
        if selected_ids:
            rows = [{
                'ID': sid,
                'Service': catalog.services[sid].name,
                'Price': catalog.services[sid].price,
                'Minutes': catalog.services[sid].execution_time_minutes,
                'Labor/h': catalog.services[sid].labor_cost_per_hour,
                'Other Costs': catalog.services[sid].other_costs_flat,
            } for sid in selected_ids]

            edited_df = st.data_editor(
                pd.DataFrame(rows),
                use_container_width=True,
                column_config={
                    "ID": st.column_config.TextColumn("ID", disabled=True),
                    "Service": st.column_config.TextColumn("Service", disabled=True),
                    "Price": st.column_config.NumberColumn("Price", min_value=0.0, format="%.2f"),
                    "Minutes": st.column_config.NumberColumn("Minutes", min_value=0, step=5),
                    "Labor/h": st.column_config.NumberColumn("Labor/h", min_value=0.0, format="%.2f"),
                    "Other Costs": st.column_config.NumberColumn("Other Costs", min_value=0.0, format="%.2f"),
                },
                hide_index=True,
                key="services_editor"
            )

            product_labels = {product_label(pid, p): pid for pid, p in catalog.products.items()}

            for _, row in edited_df.iterrows():
                service = catalog.services[row['ID']]

                # Products used by this service on this quote only
                with st.expander(f"🧴 Products: {service.name}"):
                    products_df = st.data_editor(
                        pd.DataFrame([{
                            'Product': product_label(link.product.product_id, link.product),
                            'Usage (ml)': link.usage_per_application_ml,
                            'Dilution': link.dilution_ratio,
                            'Container (ml)': link.container_size_ml,
                        } for link in service.linked_products],
                            columns=['Product', 'Usage (ml)', 'Dilution', 'Container (ml)']),
                        use_container_width=True,
                        num_rows="dynamic",
                        column_config={
                            "Product": st.column_config.SelectboxColumn(
                                "Product", options=list(product_labels), required=True),
                            "Usage (ml)": st.column_config.NumberColumn("Usage (ml)", min_value=0.0),
                            "Dilution": st.column_config.NumberColumn("Dilution 1:N", min_value=0.0),
                            "Container (ml)": st.column_config.NumberColumn("Container (ml)", min_value=0.0),
                        },
                        hide_index=True,
                        key=f"products_{row['ID']}"
                    )

                links = []
                for _, p in products_df.iterrows():
                    product_id = product_labels.get(p['Product'])
                    if product_id is None:
                        continue
                    links.append(ServiceProductLink(
                        product=catalog.products[product_id],
                        usage_per_application_ml=optional_number(p['Usage (ml)']) or 0.0,
                        dilution_ratio=optional_number(p['Dilution']),
                        container_size_ml=optional_number(p['Container (ml)']),
                    ))

                quoted_services.append(replace(
                    service,
                    price=float(row['Price']),
                    execution_time_minutes=float(row['Minutes']),
                    labor_cost_per_hour=float(row['Labor/h']),
                    other_costs_flat=float(row['Other Costs']),
                    linked_products=tuple(links),
                ))

        st.subheader("Adjustments")
        with st.container(border=True):
            a1, a2 = st.columns(2)
            with a1:
                commission_kind = st.radio("Commission", ["amount", "percentage"], horizontal=True)
                commission_value = parse_decimal_input(st.text_input("Commission value", value="0,00"))
            with a2:
                discount_kind = st.radio("Discount", ["amount", "percentage"], horizontal=True)
                discount_value = parse_decimal_input(st.text_input("Discount value", value="0,00"))
            other_costs_global = parse_decimal_input(st.text_input("Other global costs", value="0,00"))
            monthly_products_cost = 0.0
            if costing_mode == CostingMode.MONTHLY_AVERAGE:
                monthly_products_cost = parse_decimal_input(
                    st.text_input("Products cost (monthly average)", value="0,00")
                )

        st.subheader("Payment")
        with st.container(border=True):
            method_labels = {"(none)": None}
            method_labels.update({m.name or mid: mid for mid, m in catalog.payment_methods.items()})
            method_label = st.selectbox("Payment method", list(method_labels))
            method = catalog.payment_methods.get(method_labels[method_label]) if method_labels[method_label] else None

            installments = None
            if method is not None and method.kind == PaymentKind.CREDIT:
                options = available_installments(method) or [1]
                installments = st.selectbox(
                    "Installments", options,
                    format_func=lambda n: f"{n}x ({method.installment_rate_table.get(n, 0):.2f}%)"
                )

    with col2:
        st.subheader("Quote Summary")

        with st.container(border=True):
            if quoted_services:
                request = QuoteRequest(
                    services=tuple(quoted_services),
                    other_costs_global=other_costs_global,
                    commission=CommissionTerm(AdjustmentKind(commission_kind), commission_value),
                    discount=DiscountTerm(AdjustmentKind(discount_kind), discount_value),
                    payment_method=method,
                    installments=installments,
                    costing_mode=costing_mode,
                    monthly_products_cost=monthly_products_cost,
                )
                result = engine.calculate(request)

                m1, m2 = st.columns(2)
                m1.metric("Service Value", money(result.total_service_value))
                m2.metric("Net Profit", money(result.net_profit), f"{result.profit_margin_percent:.1f}%")

                m3, m4 = st.columns(2)
                m3.metric("Total Cost", money(result.total_cost))
                m4.metric("You Receive", money(result.final_price_with_fee))

                st.caption(f"**Execution time:** {format_minutes_hhmm(result.total_execution_time_minutes)}")
                st.caption(f"**Profit per hour:** "
                           f"{money(engine.profitability_per_hour(result.net_profit, result.total_execution_time_minutes))}")

                if result.warnings:
                    for warning in result.warnings:
                        st.warning(warning)

                st.divider()

                desired_margin = st.number_input("Desired margin (%)", value=40.0, step=1.0)
                try:
                    target = engine.suggested_price(result.total_cost, desired_margin)
                    st.markdown(f"Suggested price: **{money(target)}**")
                except InvalidMarginError as e:
                    st.error(str(e))

                export_df = pd.DataFrame([result.to_summary_dict()])
                st.download_button(
                    "📥 CSV",
                    data=export_df.to_csv(index=False),
                    file_name="quote_totals.csv",
                    mime="text/csv",
                    use_container_width=True
                )
            else:
                st.info("🧽 No services selected")
                st.caption("Pick services on the left to start a quote.")

    if quoted_services:
        with st.expander("📊 View Calculation Breakdown"):
            st.dataframe(
                pd.DataFrame([{k: money(v) if k != "Margin %" else f"{v:.2f}%"
                               for k, v in result.to_summary_dict().items()}]),
                use_container_width=True, hide_index=True
            )
            st.text(result.get_trace_text())


# ============================================================================
# TAB 2: CATALOG
# ============================================================================
with tab2:
    st.subheader("📚 Products")

    search_term = st.text_input("Search Products", placeholder="Enter product name...", label_visibility="collapsed")

    product_rows = []
    for product_id, product in catalog.products.items():
        if search_term and search_term.lower() not in (product.name or "").lower():
            continue
        split = dilution_split(product)
        product_rows.append({
            'ID': product_id,
            'Name': product.name,
            'Type': product.kind.value,
            'Price': product.unit_price,
            'Volume (ml)': product.container_volume_ml,
            'Dilution': format_dilution_ratio(product.dilution_ratio),
            'Cost / Application': cost_per_application(product),
            'Cost / Container': cost_per_container(product),
            'Concentrate (ml)': split.concentrate_ml,
            'Water (ml)': split.water_ml,
        })
    st.dataframe(pd.DataFrame(product_rows), use_container_width=True, hide_index=True)

    st.subheader("🧽 Services")
    service_rows = []
    for service_id, service in catalog.services.items():
        breakdown = engine.service_breakdown(service, costing_mode)
        service_rows.append({
            'ID': service_id,
            'Name': service.name,
            'Price': service.price,
            'Labor': breakdown.labor_cost,
            'Products': breakdown.products_cost,
            'Other': breakdown.other_costs,
            'Net Profit': breakdown.net_profit,
            'Margin %': round(breakdown.profit_margin_percent, 2),
            'Profit / h': breakdown.profitability_per_hour,
        })
    st.dataframe(pd.DataFrame(service_rows), use_container_width=True, hide_index=True)


# ============================================================================
# TAB 3: TOOLS
# ============================================================================
with tab3:
    c1, c2 = st.columns(2, gap="large")

    with c1:
        st.subheader("💧 Dilution")
        p1, p2 = st.columns(2)
        product_parts = p1.number_input("Product parts", min_value=0.0, value=1.0, step=1.0)
        water_parts = p2.number_input("Water parts", min_value=0.0, value=10.0, step=1.0)
        container_ml = st.select_slider("Container (ml)", options=[500, 1000, 2000, 5000], value=1000)
        split = split_by_parts(container_ml, product_parts, water_parts)
        st.metric("Product", f"{split.concentrate_ml:.0f} ml")
        st.metric("Water", f"{split.water_ml:.0f} ml")

    with c2:
        st.subheader("🎯 Suggested Price")
        total_cost = parse_decimal_input(st.text_input("Total cost", value="60,00"))
        margin = st.number_input("Margin (%)", value=40.0, step=1.0, key="tool_margin")
        try:
            st.metric("Price", money(engine.suggested_price(total_cost, margin)))
        except InvalidMarginError as e:
            st.error(str(e))


# ============================================================================
# TAB 4: SYSTEM INFO
# ============================================================================
with tab4:
    st.header("System Status")
    report = catalog.report

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Products", f"{report['metrics'].get('products', 0):,}")
    c2.metric("Services", f"{report['metrics'].get('services', 0):,}")
    c3.metric("Payment Methods", f"{report['metrics'].get('payment_methods', 0):,}")
    c4.metric("Loaded", report.get('timestamp', '')[:10])

    st.caption(f"Data directory: {report.get('data_dir')}")

    for error in report.get("errors", []):
        st.error(error)
    for warning in report.get("warnings", []):
        st.warning(warning)

    if st.button("🔄 Reload Catalog", type="secondary"):
        get_catalog.clear()
        st.toast("Catalog reloaded")
        st.rerun()
