"""
Detail Pricing Package

Pricing and profitability calculations for automotive-detailing services.
Turns catalog products, service definitions, commissions and payment fees
into cost, price and margin figures for a quote or sale.
"""

__version__ = "1.0.0"
