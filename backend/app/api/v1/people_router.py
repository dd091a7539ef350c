# backend/app/api/v1/people_router.py

"""
Router de PERSONAS y su libro de cuentas.

Endpoints:
- GET    /api/v1/people                               -> lista con saldos + totales
- POST   /api/v1/people                               -> crear persona
- GET    /api/v1/people/{id}                          -> detalle con transacciones, préstamos y saldo
- PUT    /api/v1/people/{id}                          -> actualizar
- DELETE /api/v1/people/{id}                          -> borrar (cascada de todo su historial)
- POST   /api/v1/people/{id}/transactions             -> añadir transacción
- PATCH  /api/v1/people/{id}/transactions/{tx_id}     -> marcar/desmarcar como descartada

Reglas de negocio:
- Saldo = Σ(lent) − Σ(received) de las transacciones no descartadas.
  Se recalcula en cada lectura (no hay saldo guardado).
- Las transacciones no se editan ni se borran: solo `disregarded`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from backend.app.api.v1.auth_router import require_user
from backend.app.api.v1.loans_router import to_loan_out
from backend.app.db import models
from backend.app.db.session import get_db
from backend.app.schemas.base import SuccessOut
from backend.app.schemas.people import (
    LedgerTotals,
    PeopleListOut,
    PersonCreate,
    PersonDetailOut,
    PersonOut,
    PersonUpdate,
    PersonWithBalanceOut,
)
from backend.app.schemas.transactions import TransactionCreate, TransactionOut, TransactionPatch
from backend.app.utils.ledger_utils import aggregate_totals, balance_direction, person_balance
from backend.app.utils.ownership import get_owned_person, get_owned_transaction
from backend.app.utils.text_utils import clean_optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/people", tags=["people"])

_TEXT_FIELDS = ("nickname", "email", "phone", "relationship", "notes")


# ================================
# Helpers internos
# ================================
def _person_with_balance(person: models.Person) -> dict:
    """
    Datos de la persona + campos calculados del libro de cuentas.
    """
    balance = person_balance(person.transactions)
    return dict(
        PersonOut.model_validate(person).model_dump(),
        balance=balance,
        balance_direction=balance_direction(balance),
        transactions_count=len(person.transactions),
        active_loans_count=sum(1 for loan in person.loans if not loan.is_settled),
    )


def _load_person_detail(db: Session, person_id: str, user_id: str) -> models.Person:
    get_owned_person(db, person_id, user_id)
    stmt = (
        select(models.Person)
        .where(models.Person.id == person_id)
        .options(
            selectinload(models.Person.transactions),
            selectinload(models.Person.loans).selectinload(models.Loan.payments),
        )
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalar_one()


def _person_detail_out(person: models.Person) -> PersonDetailOut:
    return PersonDetailOut(
        **_person_with_balance(person),
        transactions=[TransactionOut.model_validate(tx) for tx in person.transactions],
        loans=[to_loan_out(loan, include_person=False) for loan in person.loans],
    )


# ================================
# Endpoints CRUD de personas
# ================================
@router.get("", response_model=PeopleListOut)
def list_people(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Lista las personas del usuario con su saldo.

    Orden: por valor absoluto del saldo (deudas más grandes primero) y, a
    igualdad, las actualizadas más recientemente.
    """
    stmt = (
        select(models.Person)
        .where(models.Person.user_id == current_user.id)
        .options(
            selectinload(models.Person.transactions),
            selectinload(models.Person.loans),
        )
        .order_by(models.Person.updated_at.desc())
    )
    rows = db.execute(stmt).scalars().all()

    people = [PersonWithBalanceOut(**_person_with_balance(p)) for p in rows]
    # sort estable: conserva updated_at desc entre saldos iguales
    people.sort(key=lambda p: abs(p.balance), reverse=True)

    totals = aggregate_totals(p.balance for p in people)
    logger.info("[people] listar user_id=%s count=%s", current_user.id, len(people))
    return PeopleListOut(people=people, totals=LedgerTotals(**totals))


@router.post("", response_model=PersonOut, status_code=status.HTTP_201_CREATED)
def create_person(
    payload: PersonCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    now = datetime.now(timezone.utc)
    row = models.Person(
        user_id=current_user.id,
        name=payload.name.strip(),
        nickname=clean_optional(payload.nickname),
        email=clean_optional(payload.email),
        phone=clean_optional(payload.phone),
        relationship=clean_optional(payload.relationship),
        notes=clean_optional(payload.notes),
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(row)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Conflicto de integridad al crear la persona.")

    db.refresh(row)
    logger.info("[people] crear user_id=%s person_id=%s", current_user.id, row.id)
    return row


@router.get("/{person_id}", response_model=PersonDetailOut)
def get_person(
    person_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Detalle de una persona con:
    - transacciones (más recientes primero)
    - préstamos con total pagado / pendiente
    - saldo calculado y su dirección
    """
    person = _load_person_detail(db, person_id, current_user.id)
    return _person_detail_out(person)


@router.put("/{person_id}", response_model=PersonOut)
def update_person(
    person_id: str,
    payload: PersonUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    row = get_owned_person(db, person_id, current_user.id)

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        row.name = changes["name"].strip()
    for field in _TEXT_FIELDS:
        if field in changes:
            setattr(row, field, clean_optional(changes[field]))

    row.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{person_id}", response_model=SuccessOut)
def delete_person(
    person_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Borra la persona. La BD se encarga (ON DELETE CASCADE) de sus
    transacciones, préstamos y pagos en la misma sentencia.
    """
    row = get_owned_person(db, person_id, current_user.id)
    db.delete(row)
    db.commit()
    logger.info("[people] borrar user_id=%s person_id=%s", current_user.id, person_id)
    return SuccessOut()


# ================================
# Transacciones
# ================================
@router.post(
    "/{person_id}/transactions",
    response_model=TransactionOut,
    status_code=status.HTTP_201_CREATED,
)
def create_transaction(
    person_id: str,
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Añade un movimiento al libro de la persona y actualiza su updated_at
    (en el mismo commit).
    """
    person = get_owned_person(db, person_id, current_user.id)

    now = datetime.now(timezone.utc)
    tx = models.Transaction(
        person_id=person.id,
        type=payload.type,
        amount=payload.amount,
        date=payload.date,
        description=clean_optional(payload.description),
        disregarded=False,
        created_at=now,
    )
    person.updated_at = now

    try:
        db.add(tx)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("[people] crear transacción FAILED user_id=%s person_id=%s", current_user.id, person_id)
        raise HTTPException(status_code=500, detail="Error interno creando la transacción")

    db.refresh(tx)
    logger.info(
        "[people] transacción user_id=%s person_id=%s tx_id=%s type=%s",
        current_user.id, person_id, tx.id, tx.type.value,
    )
    return tx


@router.patch("/{person_id}/transactions/{tx_id}", response_model=TransactionOut)
def update_transaction(
    person_id: str,
    tx_id: str,
    payload: TransactionPatch,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Marca (o desmarca) una transacción como descartada. Es el único campo
    modificable de una transacción.
    """
    tx = get_owned_transaction(db, person_id, tx_id, current_user.id)
    tx.disregarded = payload.disregarded
    db.commit()
    db.refresh(tx)
    logger.info(
        "[people] disregarded=%s user_id=%s tx_id=%s",
        tx.disregarded, current_user.id, tx_id,
    )
    return tx
