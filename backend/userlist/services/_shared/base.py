# userlist/services/_shared/base.py
from __future__ import annotations

from userlist.core import errors as api_errors
from userlist.services._shared.errors import NotFoundError, ServiceError, ValidationError


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web leakage.
    """

    # Client-facing message for 404s; falls back to the domain error text
    not_found_message: str | None = None

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(self.not_found_message or str(exc))

        if isinstance(exc, ValidationError):
            # → 400 Bad Request
            details = {"field": exc.field} if exc.field else None
            return api_errors.BadRequest(exc.message, details=details)

        # Any other ServiceError subclass → generic 400
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
