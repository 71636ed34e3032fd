"""
Khata Kernel

Shared foundation for the khata ledger:
- Decimal-only amounts with an explicit settlement tolerance
- Master parties and the six transaction record types
- Financial-year periods
- Structured JSON logging and typed exceptions
"""

__version__ = "0.1.0"
