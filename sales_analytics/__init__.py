"""
Sales Analytics API

Monthly revenue statistics, price-range histograms and category breakdowns
over a catalog of product-sale records.
"""

__version__ = "1.0.0"
