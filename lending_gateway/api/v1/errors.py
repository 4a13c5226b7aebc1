"""Translate domain exceptions raised inside route handlers into HTTP errors"""

import logging
from contextlib import contextmanager
from typing import Iterator
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from lending_gateway.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from lending_gateway.infrastructure.observability.metrics import storage_failures_counter


@contextmanager
def handle_domain_errors(db: Session, request_id: str) -> Iterator[None]:
    """Roll back the request session and map domain failures to status codes"""
    try:
        yield
    except HTTPException:
        db.rollback()
        raise

    except ValidationError as e:
        db.rollback()
        logging.warning(f"Validation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except AuthenticationError as e:
        db.rollback()
        logging.warning(f"Authentication failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=401, detail=str(e))

    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except ConflictError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))

    except (StorageUnavailableError, SQLAlchemyError) as e:
        storage_failures_counter.inc()
        db.rollback()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Storage service unavailable")

    except Exception as e:
        db.rollback()
        logging.exception(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
