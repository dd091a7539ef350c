# backend/app/db/custom_types.py

"""
Tipos personalizados relacionados con la base de datos y los schemas.

- Money: alias tipado de Decimal, para representar importes monetarios.
- ZERO / CENT: constantes de apoyo para las sumas.
- to_money: cuantiza a 2 decimales (ROUND_HALF_UP).

¿Por qué así?
-------------
- Pydantic trabaja muy bien con Decimal para dinero.
- En BD los importes son NUMERIC(10, 2).
- Nunca pasamos por float: las sumas de saldos tienen que dar
  exactamente lo mismo cada vez que se recalculan.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import TypeAlias

# Alias de tipo: para Pylance y para el editor, Money es "un Decimal"
Money: TypeAlias = Decimal

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_money(value) -> Money:
    """
    Convierte a Decimal con 2 decimales.

    - None -> 0.00
    - int / str / Decimal -> Decimal cuantizado
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
