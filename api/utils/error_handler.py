"""Error handling utilities for API endpoints."""

from collections.abc import Callable
from typing import TypeVar

from fastapi import HTTPException, status

from core.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def handle_api_operation(
    operation: Callable[[], T],
    error_message: str = "Operation failed",
) -> T:
    """Run an operation, mapping failures to HTTP errors.

    ``ValueError`` becomes 400; anything else is logged and becomes 500.
    """
    try:
        return operation()
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"{error_message}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{error_message}: {str(e)}",
        )
