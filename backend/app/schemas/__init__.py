# backend/app/schemas/__init__.py
"""
Paquete de schemas Pydantic.

Un módulo por recurso:
- auth.py
- expenses.py
- people.py / transactions.py
- loans.py
- dashboard.py
"""

from .base import ApiModel, SuccessOut

__all__ = ["ApiModel", "SuccessOut"]
