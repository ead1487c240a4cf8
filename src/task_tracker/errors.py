from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import status

from .store import StoreError

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """An error the gateway answers with `{"error": message}` and the given status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


# PUBLIC_INTERFACE
@contextmanager
def store_boundary(failure_message: str) -> Iterator[None]:
    """
    Run a block of store access and translate any failure into a GatewayError.

    - GatewayError raised inside the block passes through unchanged.
    - StoreError becomes a 500 carrying the store's own message.
    - Anything else becomes a 500 with `failure_message`; the traceback is logged.
    """
    try:
        yield
    except GatewayError:
        raise
    except StoreError as e:
        logger.warning("Store error: %s", e.message)
        raise GatewayError(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message) from e
    except Exception as e:
        logger.exception("Unexpected error: %s", failure_message)
        raise GatewayError(status.HTTP_500_INTERNAL_SERVER_ERROR, failure_message) from e
