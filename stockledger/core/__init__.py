"""
Core domain layer.

Entities, interfaces (ports), exceptions and the stock engine services.
Nothing here depends on infrastructure.
"""
