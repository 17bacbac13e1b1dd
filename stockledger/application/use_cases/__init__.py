"""Application use cases."""

from stockledger.application.use_cases.add_product import AddProductUseCase
from stockledger.application.use_cases.register_movement import RegisterMovementUseCase
from stockledger.application.use_cases.remove_product import RemoveProductUseCase
from stockledger.application.use_cases.stock_reports import StockReportsUseCase
from stockledger.application.use_cases.update_product import UpdateProductUseCase

__all__ = [
    "AddProductUseCase",
    "RegisterMovementUseCase",
    "RemoveProductUseCase",
    "StockReportsUseCase",
    "UpdateProductUseCase",
]
