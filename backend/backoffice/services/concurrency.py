# Overview: Transaction helpers shared by services; row locks, retries and store-error mapping.

from __future__ import annotations

import time
from typing import Callable, TypeVar

from flask import current_app
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..validation import BackofficeError, StoreError

T = TypeVar("T")


def lock_for_update(query):
    """
    Apply row-level locking for read-modify-write sequences.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def run_in_transaction(
    func: Callable[[], T],
    *,
    attempts: int = 3,
    backoff_base: float = 0.1,
) -> T:
    """
    Run func and commit as one transaction.

    Retries on OperationalError (deadlocks, locks) and StaleDataError
    (version_id conflicts on products). Business errors roll back and
    propagate unchanged; any other SQLAlchemy failure is rolled back and
    re-raised as StoreError with the store's message.
    """
    for attempt in range(attempts):
        try:
            result = func()
            db.session.commit()
            return result
        except BackofficeError:
            db.session.rollback()
            raise
        except (OperationalError, StaleDataError) as exc:
            db.session.rollback()
            if attempt >= attempts - 1:
                current_app.logger.warning("Transaction failed after %d attempts: %s", attempts, exc)
                raise StoreError(_store_message(exc)) from exc
            time.sleep(backoff_base * (2 ** attempt))
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StoreError(_store_message(exc)) from exc
    raise StoreError("Transaction was not attempted")


def _store_message(exc: Exception) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)
