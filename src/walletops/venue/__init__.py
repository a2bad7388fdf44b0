"""
Swap venue (Bebop PMM) quote client.
"""

from .bebop import BEBOP_SETTLEMENT_ADDRESS, BebopClient, Quote

__all__ = ["BEBOP_SETTLEMENT_ADDRESS", "BebopClient", "Quote"]
