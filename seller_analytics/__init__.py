"""
Seller analytics core.

Bounded-concurrency fetching, comparison periods, and metric aggregation
for marketplace seller analytics consoles.
"""

__version__ = "1.0.0"
