"""
Custom Exception Classes for the Proof Ingestor

Provides a small hierarchy of specific exceptions for the failure scenarios
of a tick, so each layer can decide what it recovers from and what it
propagates.

Exception Hierarchy:
├── ProofIngestorError (Base)
│   ├── ConfigurationError
│   ├── DataValidationError
│   ├── ProofFetchError
│   ├── SubmissionError
│   └── UnexpectedError
"""

from typing import Optional, Dict, Any


class ProofIngestorError(Exception):
    """
    Base exception for all proof ingestor errors.
    Enables catching every expected failure with: except ProofIngestorError
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None
    ):
        """
        Initialize error with structured information.

        Args:
            message: Human-readable error message
            error_code: Error code for classification (e.g., 'HTTP_STATUS')
            details: Additional context dict
            original_error: Original exception that caused this (for error chaining)
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        error_str = f"{self.__class__.__name__}: {self.message}"
        if self.error_code:
            error_str += f" (Code: {self.error_code})"
        if self.details:
            error_str += f" | Details: {self.details}"
        return error_str


# ============================================================================
# CONFIGURATION & VALIDATION ERRORS
# ============================================================================

class ConfigurationError(ProofIngestorError):
    """
    Raised when configuration is invalid or incomplete.
    Examples: Missing RPC_URL, bad contract address, unknown asset category
    Action: Fix configuration and restart; the process must not start
    """
    pass


class DataValidationError(ProofIngestorError):
    """
    Raised when a value fails a format check.
    Examples: Malformed Ethereum address
    """
    pass


# ============================================================================
# PIPELINE ERRORS
# ============================================================================

class ProofFetchError(ProofIngestorError):
    """
    Raised when the proof service cannot provide a usable payload.
    Covers transport failures, non-2xx statuses and malformed bodies.
    Action: Retried locally; on exhaustion the tick is aborted
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
        **kwargs
    ):
        self.status_code = status_code
        self.response_data = response_data
        super().__init__(message, **kwargs)


class SubmissionError(ProofIngestorError):
    """
    Raised when the chain client rejects an ingestProof call.
    Network errors, reverts, nonce or signing failures are all opaque here.
    Action: Retried locally; on exhaustion the tick is aborted
    """
    pass


class UnexpectedError(ProofIngestorError):
    """
    Wraps anything else raised during a tick.
    Caught at the tick boundary and logged; never crashes the process.
    """
    pass
