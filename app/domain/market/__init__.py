"""
Market bounded context: domain layer.

This module contains all domain logic for the market context:
- Quotes, price history and company fundamentals (via ports)
- Moving-average indicators over price history
- Risk radar: news classification and per-category aggregation
"""
