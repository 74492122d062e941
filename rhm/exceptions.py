"""Base exception hierarchy for RHM.

All RHM exceptions inherit from RHMError, enabling consistent error handling
across the health monitor.
"""

UNAUTHORIZED_MESSAGE = "Unauthorized: Invalid admin API key"


class RHMError(Exception):
    """Base exception for all RHM errors."""

    pass


class APIError(RHMError):
    """Base for API-related errors."""

    pass


class EvaluationError(RHMError):
    """Base for failures while producing a health report."""

    pass


# =============================================================================
# API Exceptions
# =============================================================================


class AuthorizationError(APIError):
    """Raised when the admin credential is missing or wrong.

    The message is fixed so callers learn nothing about why the credential
    was rejected.
    """

    def __init__(self, message: str = UNAUTHORIZED_MESSAGE):
        super().__init__(message)


# =============================================================================
# Evaluation Exceptions
# =============================================================================


class SnapshotCollectionError(EvaluationError):
    """Raised when the metrics snapshot cannot be collected."""

    pass
