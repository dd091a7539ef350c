# backend/app/api/v1/loans_router.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from backend.app.api.v1.auth_router import require_user
from backend.app.core.config import settings
from backend.app.core.constants import LoanDirection
from backend.app.db import models
from backend.app.db.session import get_db
from backend.app.schemas.base import SuccessOut
from backend.app.schemas.loans import (
    LoanCreate,
    LoanOut,
    LoanPaymentCreate,
    LoanPaymentOut,
    LoanPaymentResult,
    LoanUpdate,
)
from backend.app.utils.ledger_utils import apply_settlement, loan_remaining, loan_total_paid
from backend.app.utils.ownership import get_owned_loan, get_owned_person
from backend.app.utils.text_utils import clean_optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/loans", tags=["loans"])


def to_loan_out(loan: models.Loan, *, include_person: bool = True) -> LoanOut:
    """
    Préstamo -> LoanOut con total pagado y pendiente recalculados.
    """
    out = LoanOut.model_validate(loan)
    out.total_paid = loan_total_paid(loan.payments)
    out.remaining = loan_remaining(loan)
    if not include_person:
        out.person = None
    return out


def _reload_loan(db: Session, loan_id: str) -> models.Loan:
    stmt = (
        select(models.Loan)
        .where(models.Loan.id == loan_id)
        .options(selectinload(models.Loan.payments), selectinload(models.Loan.person))
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalar_one()


# =======================================================
# Endpoints principales de préstamo
# =======================================================

@router.get("", response_model=list[LoanOut])
def list_loans(
    active: Optional[bool] = Query(None, description="Si es true, solo préstamos sin liquidar."),
    person_id: Optional[str] = Query(None, alias="personId"),
    direction: Optional[LoanDirection] = Query(None, description="lent o borrowed"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Lista préstamos del usuario autenticado, con filtros opcionales:
      - active=true: solo los no liquidados
      - personId: de una persona concreta
      - direction: lent / borrowed
    Orden: fecha del préstamo descendente.
    """
    stmt = (
        select(models.Loan)
        .join(models.Person, models.Person.id == models.Loan.person_id)
        .where(models.Person.user_id == current_user.id)
        .options(selectinload(models.Loan.payments), selectinload(models.Loan.person))
    )
    if active:
        stmt = stmt.where(models.Loan.is_settled.is_(False))
    if person_id:
        stmt = stmt.where(models.Loan.person_id == person_id)
    if direction:
        stmt = stmt.where(models.Loan.direction == direction)

    rows = db.execute(stmt.order_by(models.Loan.transaction_date.desc())).scalars().all()
    logger.info("[loans] listar user_id=%s count=%s", current_user.id, len(rows))
    return [to_loan_out(loan) for loan in rows]


@router.post("", response_model=LoanOut, status_code=status.HTTP_201_CREATED)
def create_loan(
    payload: LoanCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Crea un préstamo para el usuario actual.

    Reglas clave:
    - Con person_id: la persona debe ser del usuario (404 si no).
    - Sin person_id pero con person_name: se crea la persona con el user_id
      del usuario actual.
    - Persona + préstamo van en un único commit: si falla el préstamo no
      queda una persona huérfana.
    """
    now = datetime.now(timezone.utc)

    if payload.person_id:
        person = get_owned_person(db, payload.person_id, current_user.id)
    else:
        person = models.Person(
            user_id=current_user.id,
            name=payload.person_name.strip(),
            nickname=clean_optional(payload.person_nickname),
            email=clean_optional(payload.person_email),
            phone=clean_optional(payload.person_phone),
            relationship=clean_optional(payload.person_relationship),
            created_at=now,
            updated_at=now,
        )
        db.add(person)

    try:
        db.flush()  # asegura person.id

        loan = models.Loan(
            person_id=person.id,
            direction=payload.direction,
            amount=payload.amount,
            currency=(payload.currency or settings.DEFAULT_CURRENCY).upper(),
            reason=payload.reason.strip(),
            transaction_date=payload.transaction_date,
            expected_settlement=payload.expected_settlement,
            is_settled=False,
            notes=clean_optional(payload.notes),
            created_at=now,
            updated_at=now,
        )
        db.add(loan)
        person.updated_at = now
        db.commit()

    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=409, detail="Conflicto de integridad al crear el préstamo."
        )
    except Exception:
        db.rollback()
        logger.exception("[loans] crear FAILED user_id=%s", current_user.id)
        raise HTTPException(
            status_code=500, detail="Error interno creando el préstamo"
        )

    logger.info("[loans] crear user_id=%s loan_id=%s person_id=%s", current_user.id, loan.id, person.id)
    return to_loan_out(_reload_loan(db, loan.id))


@router.get("/{loan_id}", response_model=LoanOut)
def get_loan(
    loan_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Recupera un préstamo (solo si pertenece al usuario) con sus pagos.
    """
    loan = get_owned_loan(db, loan_id, current_user.id)
    return to_loan_out(_reload_loan(db, loan.id))


@router.put("/{loan_id}", response_model=LoanOut)
def update_loan(
    loan_id: str,
    payload: LoanUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Actualiza campos de un préstamo del usuario.

    - Solo se tocan los campos presentes en el body.
    - is_settled no se acepta del cliente; si cambia el importe se vuelve a
      comprobar la liquidación (solo open -> settled).
    """
    loan = get_owned_loan(db, loan_id, current_user.id, for_update=True)

    changes = payload.model_dump(exclude_unset=True)
    for field in ("direction", "amount", "reason", "transaction_date"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    for field, val in changes.items():
        if field == "notes":
            val = clean_optional(val)
        elif field == "currency":
            val = (val or settings.DEFAULT_CURRENCY).upper()
        elif field == "reason":
            val = val.strip()
        setattr(loan, field, val)

    if "amount" in changes:
        apply_settlement(loan)

    loan.updated_at = datetime.now(timezone.utc)
    db.commit()
    return to_loan_out(_reload_loan(db, loan.id))


@router.delete("/{loan_id}", response_model=SuccessOut)
def delete_loan(
    loan_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """Borra el préstamo y (en cascada) sus pagos."""
    loan = get_owned_loan(db, loan_id, current_user.id)
    db.delete(loan)
    db.commit()
    logger.info("[loans] borrar user_id=%s loan_id=%s", current_user.id, loan_id)
    return SuccessOut()


# =======================================================
# Pagos
# =======================================================

@router.get("/{loan_id}/payments", response_model=list[LoanPaymentOut])
def list_payments(
    loan_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """Pagos del préstamo, más recientes primero."""
    loan = get_owned_loan(db, loan_id, current_user.id)
    stmt = (
        select(models.LoanPayment)
        .where(models.LoanPayment.loan_id == loan.id)
        .order_by(models.LoanPayment.paid_at.desc())
    )
    return db.execute(stmt).scalars().all()


@router.post(
    "/{loan_id}/payments",
    response_model=LoanPaymentResult,
    status_code=status.HTTP_201_CREATED,
)
def create_payment(
    loan_id: str,
    payload: LoanPaymentCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Registra un pago y comprueba si el préstamo queda liquidado.

    Pasos (un único commit, con la fila del préstamo bloqueada):
    1. Comprueba propiedad y bloquea el préstamo.
    2. Inserta el pago.
    3. Recalcula Σ pagos; si cubre el principal -> is_settled = True.
    """
    loan = get_owned_loan(db, loan_id, current_user.id, for_update=True)
    now = datetime.now(timezone.utc)

    try:
        payment = models.LoanPayment(
            loan_id=loan.id,
            amount=payload.amount,
            paid_at=payload.paid_at,
            method=payload.method,
            notes=clean_optional(payload.notes),
            created_at=now,
        )
        db.add(payment)
        db.flush()

        db.expire(loan, ["payments"])  # siguiente acceso recarga los pagos con el nuevo
        if apply_settlement(loan):
            loan.updated_at = now
            logger.info("[loans] liquidado user_id=%s loan_id=%s", current_user.id, loan.id)

        db.commit()

    except Exception:
        db.rollback()
        logger.exception("[loans] pago FAILED user_id=%s loan_id=%s", current_user.id, loan_id)
        raise HTTPException(status_code=500, detail="Error interno registrando el pago")

    db.refresh(payment)
    logger.info("[loans] pago user_id=%s loan_id=%s payment_id=%s", current_user.id, loan_id, payment.id)
    return LoanPaymentResult(
        payment=LoanPaymentOut.model_validate(payment),
        loan=to_loan_out(_reload_loan(db, loan_id)),
    )
