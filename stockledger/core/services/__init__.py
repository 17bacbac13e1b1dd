"""Core business services."""

from stockledger.core.services.catalog import ProductCatalog
from stockledger.core.services.category_policy import (
    CategoryPolicy,
    PerishablePolicy,
    StandardPolicy,
    policy_for,
)
from stockledger.core.services.ledger import AppliedMovement, MovementLedger
from stockledger.core.services.locks import ProductLocks
from stockledger.core.services.reports import ReportEngine
from stockledger.core.services.signal import CacheInvalidationSignal
from stockledger.core.services.validation import (
    check_product,
    validate_movement,
    validate_product,
)

__all__ = [
    "ProductCatalog",
    "CategoryPolicy",
    "StandardPolicy",
    "PerishablePolicy",
    "policy_for",
    "MovementLedger",
    "AppliedMovement",
    "ProductLocks",
    "ReportEngine",
    "CacheInvalidationSignal",
    "check_product",
    "validate_product",
    "validate_movement",
]
