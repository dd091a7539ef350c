# backend/app/utils/ownership.py

"""
Comprobaciones de propiedad (cadena User -> Person -> Transaction/Loan -> Payment).

Reglas:
- Cada función recibe el user_id EXPLÍCITO (nada de usuario "global").
- Si la entidad no existe o es de otro usuario -> 404 en ambos casos,
  para no filtrar la existencia de datos ajenos.
- Cada endpoint vuelve a llamar a su comprobación; no se cachea nada.
"""

from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.db import models


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def get_owned_person(db: Session, person_id: str, user_id: str) -> models.Person:
    stmt = select(models.Person).where(
        models.Person.id == person_id,
        models.Person.user_id == user_id,
    )
    person = db.execute(stmt).scalar_one_or_none()
    if person is None:
        raise _not_found("Persona no encontrada")
    return person


def get_owned_transaction(
    db: Session,
    person_id: str,
    tx_id: str,
    user_id: str,
) -> models.Transaction:
    """
    Transacción -> Persona -> Usuario.

    Primero se valida la persona (404 "Persona no encontrada") y después
    que la transacción cuelgue de esa persona.
    """
    get_owned_person(db, person_id, user_id)

    stmt = select(models.Transaction).where(
        models.Transaction.id == tx_id,
        models.Transaction.person_id == person_id,
    )
    tx = db.execute(stmt).scalar_one_or_none()
    if tx is None:
        raise _not_found("Transacción no encontrada")
    return tx


def get_owned_loan(
    db: Session,
    loan_id: str,
    user_id: str,
    *,
    for_update: bool = False,
) -> models.Loan:
    """
    Préstamo -> Persona -> Usuario.

    for_update=True bloquea la fila del préstamo (SELECT ... FOR UPDATE) hasta
    el commit; así "insertar pago + comprobar liquidación" es atómico.
    En SQLite el FOR UPDATE se ignora.
    """
    stmt = (
        select(models.Loan)
        .join(models.Person, models.Person.id == models.Loan.person_id)
        .where(
            models.Loan.id == loan_id,
            models.Person.user_id == user_id,
        )
    )
    if for_update:
        stmt = stmt.with_for_update(of=models.Loan)

    loan = db.execute(stmt).scalar_one_or_none()
    if loan is None:
        raise _not_found("Préstamo no encontrado")
    return loan


def get_owned_expense(db: Session, expense_id: str, user_id: str) -> models.RecurringExpense:
    stmt = select(models.RecurringExpense).where(
        models.RecurringExpense.id == expense_id,
        models.RecurringExpense.user_id == user_id,
    )
    expense = db.execute(stmt).scalar_one_or_none()
    if expense is None:
        raise _not_found("Gasto no encontrado")
    return expense
