"""
Affiliate Link Parser - Main application package.

A FastAPI service that expands shortened affiliate links and extracts
product data (title, prices, installments, image) from the store page.
"""
__version__ = "1.0.0"

__all__ = ["__version__"]
