# Overview: Read-only access to the studio session and add-on catalogs.

"""
Catalog Service

Sessions and add-ons are static price lists. Booking code receives them
through a small read-only repository object (SqlCatalog by default) instead
of querying the tables directly, so callers and tests can inject another
source.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from flask import current_app

from ..extensions import db
from ..models import Session, AddOn


DEFAULT_SESSIONS = [
    ("Sesi 1 (11.00 - 13.00)", 85000),
    ("Sesi 2 (13.00 - 15.00)", 85000),
    ("Sesi 3 (15.00 - 17.00)", 85000),
    ("Sesi 4 (17.00 - 19.00)", 85000),
    ("Sesi 5 (19.00 - 21.00)", 85000),
    ("Sesi 6 (21.00 - 23.00)", 85000),
    ("Sesi 7 (23.00 - 01.00)", 85000),
]

DEFAULT_ADD_ONS = [
    ("Senar Gitar", 10000),
    ("Senar Bass", 50000),
    ("Pick Gitar", 75000),
    ("Stick Drum", 25000),
    ("Air Putih", 5000),
    ("Teh", 5000),
    ("Kopi", 5000),
]


class Catalog(Protocol):
    def list_sessions(self) -> list[Session]: ...

    def list_add_ons(self) -> list[AddOn]: ...

    def sessions_by_id(self, ids: Iterable[int]) -> dict[int, Session]: ...

    def add_ons_by_id(self, ids: Iterable[int]) -> dict[int, AddOn]: ...


class SqlCatalog:
    """Catalog backed by the studio_sessions / add_ons tables."""

    def list_sessions(self) -> list[Session]:
        return db.session.query(Session).order_by(Session.id).all()

    def list_add_ons(self) -> list[AddOn]:
        return db.session.query(AddOn).order_by(AddOn.id).all()

    def sessions_by_id(self, ids: Iterable[int]) -> dict[int, Session]:
        ids = set(ids)
        if not ids:
            return {}
        rows = db.session.query(Session).filter(Session.id.in_(ids)).all()
        return {s.id: s for s in rows}

    def add_ons_by_id(self, ids: Iterable[int]) -> dict[int, AddOn]:
        ids = set(ids)
        if not ids:
            return {}
        rows = db.session.query(AddOn).filter(AddOn.id.in_(ids)).all()
        return {a.id: a for a in rows}


def get_catalog(catalog: Catalog | None = None) -> Catalog:
    return catalog if catalog is not None else SqlCatalog()


def seed_default_catalog() -> dict:
    """
    Insert the default sessions and add-ons that are missing (by name).

    Idempotent. Returns counts of rows created.
    """
    existing_sessions = {name for (name,) in db.session.query(Session.name).all()}
    existing_add_ons = {name for (name,) in db.session.query(AddOn.name).all()}

    created_sessions = 0
    for name, price in DEFAULT_SESSIONS:
        if name not in existing_sessions:
            db.session.add(Session(name=name, price=price))
            created_sessions += 1

    created_add_ons = 0
    for name, price in DEFAULT_ADD_ONS:
        if name not in existing_add_ons:
            db.session.add(AddOn(name=name, price=price))
            created_add_ons += 1

    db.session.commit()

    if created_sessions or created_add_ons:
        current_app.logger.info(
            "Catalog seeded: %d sessions, %d add-ons", created_sessions, created_add_ons
        )
    return {"sessions": created_sessions, "add_ons": created_add_ons}
