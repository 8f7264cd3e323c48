"""
Central HTTP error factory.

Routes and services raise the HTTPException returned by these helpers so that
status codes, messages and log levels stay consistent across resources.
Unexpected failures are logged with their traceback internally and answered
with a generic message externally.
"""
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class BusinessError:
    """Domain errors for the store / medicine / billing / user API."""

    @staticmethod
    def not_found(resource: str = "Resource", reason: str = "") -> HTTPException:
        """
        404 for a missing record.

        Also used when a store-scoped user asks for a record of another store,
        so the answer is the same whether the record exists or not.

        Example:
            raise BusinessError.not_found("Store")  # -> "Store not found"
        """
        if reason:
            logger.info(f"Not found: {resource} - {reason}")
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )

    @staticmethod
    def unauthorized(detail: str = "Not authenticated", reason: str = "") -> HTTPException:
        """401 for missing, invalid or expired credentials."""
        logger.warning(f"Unauthorized access attempt: {reason or detail}")
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @staticmethod
    def forbidden(detail: str = "Access denied", reason: str = "") -> HTTPException:
        """403 for an authenticated user lacking the role or store scope."""
        logger.warning(f"Forbidden access: {reason or detail}")
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )

    @staticmethod
    def bad_request(detail: str) -> HTTPException:
        """
        400 for input validation and referential-integrity errors.

        OK to include specific details here since the caller caused the issue.
        Examples: "Store name already exists", "Medicine is out of stock"
        """
        logger.info(f"Bad request: {detail}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    @staticmethod
    def server_error(original_error: Exception = None) -> HTTPException:
        """
        Generic 500 - logs actual error internally, hides it from the client.
        """
        if original_error:
            logger.error(
                f"Internal server error: {type(original_error).__name__}: {str(original_error)}",
                exc_info=original_error,
            )
        else:
            logger.error("Internal server error occurred", exc_info=True)

        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred. Please try again later.",
        )
