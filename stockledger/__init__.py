"""StockLedger: product catalog, stock movement ledger and stock reports."""

__version__ = "1.0.0"
