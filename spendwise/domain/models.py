"""Domain type definitions for spendwise.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- Month: Month in YYYY-MM format
- CategoryName: Name of a transaction category
- Description: Transaction description text
- CurrencyCode: Three letter currency code (e.g. "USD")
- TransactionId: Opaque transaction identifier
"""

from typing import NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

CategoryName = NewType("CategoryName", str)

Description = NewType("Description", str)

CurrencyCode = NewType("CurrencyCode", str)

TransactionId = NewType("TransactionId", str)
