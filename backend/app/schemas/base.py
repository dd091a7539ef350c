# backend/app/schemas/base.py

"""
Base común de los schemas de la API.

- En JSON las claves van en camelCase (isSettled, dueDay, theyOweMe...).
- En entrada se acepta camelCase o snake_case.
- from_attributes: se pueden construir directamente desde modelos SQLAlchemy.
- Los importes (Decimal) salen en JSON como string ("100.00"), nunca float.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessOut(ApiModel):
    success: bool = True
