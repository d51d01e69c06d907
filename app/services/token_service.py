"""
Token Service
Front-desk visit tokens: a single monotonic counter row.
"""
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.extensions import db
from app.models import Counter, TOKEN_COUNTER
from app.models.base import utcnow

logger = logging.getLogger(__name__)


def next_token() -> int:
    """
    Issue the next token and commit it.

    The increment happens inside the database (current = current + 1) and the
    new value is read back in the same transaction, so two callers can never
    observe the same value. The first call creates the row; if another caller
    creates it first the insert fails and the increment is retried.

    Returns:
        int: the issued token
    """
    for attempt in range(2):
        try:
            result = db.session.execute(
                update(Counter)
                .where(Counter.name == TOKEN_COUNTER)
                .values(current=Counter.current + 1, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.session.add(Counter(name=TOKEN_COUNTER, current=1))
                db.session.flush()

            token = db.session.execute(
                select(Counter.current).where(Counter.name == TOKEN_COUNTER)
            ).scalar_one()
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if attempt == 0:
                logger.info("Token counter created concurrently, retrying increment")
                continue
            logger.error("Failed to generate token", exc_info=True)
            raise
        except SQLAlchemyError:
            db.session.rollback()
            logger.error("Failed to generate token", exc_info=True)
            raise

        logger.info(f"Token generated: {token}")
        return token


def current_token() -> int:
    """Last issued token, 0 before the first one"""
    value = db.session.execute(
        select(Counter.current).where(Counter.name == TOKEN_COUNTER)
    ).scalar_one_or_none()
    return value or 0


def reset_counter(new_value: int = 0) -> int:
    """
    Overwrite the counter. Operational recovery only: resetting below an
    issued token makes the next registration collide with it.
    """
    if new_value < 0:
        raise ValueError("Token counter cannot be negative")

    try:
        counter = db.session.get(Counter, TOKEN_COUNTER)
        if counter is None:
            db.session.add(Counter(name=TOKEN_COUNTER, current=new_value))
        else:
            counter.current = new_value
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.error("Failed to reset token counter", exc_info=True)
        raise

    logger.warning(f"Token counter reset to {new_value}")
    return new_value
