# backend/app/db/base.py

"""
Clase Base de SQLAlchemy para todas las tablas del ORM.

Las constraints llevan nombres estables (naming convention) para que
los índices/FKs se llamen igual en Postgres y en SQLite.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))
