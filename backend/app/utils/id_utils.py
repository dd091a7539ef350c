# backend/app/utils/id_utils.py

"""
Utilidades para la generación de IDs.

Objetivo:
- Tener un único sitio donde se definan los patrones de IDs
  (prefijos, longitud, alfabeto).
- Evitar duplicar lógica en cada modelo.

Incluye:
- random_code: genera un código aleatorio (minúsculas + dígitos por defecto).
- generate_random_id: ID simple sin comprobar BD (el espacio de IDs es
  muy grande y además la PK controla colisiones con IntegrityError).
- Wrappers específicos, usados como `default=` en los modelos.
"""

from __future__ import annotations

import secrets
import string

# Alfabeto de los IDs (minúsculas + dígitos)
LOWER_ALNUM = string.ascii_lowercase + string.digits

DEFAULT_ID_LENGTH = 20


def random_code(length: int = DEFAULT_ID_LENGTH, *, alphabet: str = LOWER_ALNUM) -> str:
    """
    Genera un código aleatorio de `length` caracteres a partir del
    alfabeto indicado.

    Ejemplo:
        random_code(6) -> 'a3z91b'
    """
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_random_id(
    prefix: str,
    *,
    length: int = DEFAULT_ID_LENGTH,
    alphabet: str = LOWER_ALNUM,
) -> str:
    """
    Genera un ID del estilo:

        <prefix><codigo>

    Ejemplo:
        generate_random_id("per_") -> 'per_k3j9x0q2...'
    """
    return f"{prefix}{random_code(length=length, alphabet=alphabet)}"


def generate_user_id() -> str:
    return generate_random_id("usr_")


def generate_person_id() -> str:
    return generate_random_id("per_")


def generate_transaction_id() -> str:
    return generate_random_id("txn_")


def generate_loan_id() -> str:
    return generate_random_id("loan_")


def generate_loan_payment_id() -> str:
    return generate_random_id("pay_")


def generate_expense_id() -> str:
    return generate_random_id("exp_")
