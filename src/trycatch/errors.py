"""Exception hierarchy for trycatch.

These exceptions describe misuse of the library itself (bad configuration,
unregistered types, payload mismatches). Error payloads thrown through the
propagation operators are never turned into exceptions.
"""

from __future__ import annotations

from typing import Any

# --- Actionable Hints ---

HINTS = {
    "unregistered_type": (
        "Declare the type first with declare_result(), declare_result_ptr() or "
        "declare_result_const_ptr()."
    ),
    "no_result_context": (
        "Decorate the enclosing function with @result_context(T) so the error "
        "has a home Result type to return into."
    ),
    "uncaught_throw": (
        "throw() under the jump backend requires an enclosing try_catch() on the "
        "same thread."
    ),
    "none_payload": "None is the 'no error' sentinel; throw a real payload instead.",
    "abort_hook_returned": "Abort hooks must terminate the process or raise.",
}


class TryCatchError(Exception):
    """Base exception for all library-specific errors."""

    def __init__(self, message: str | None, hint: str | None = None):
        """Initialize with an optional actionable hint."""
        self.hint = hint
        msg_str = str(message) if message is not None else "None"
        super().__init__(msg_str)

    def __str__(self) -> str:
        """Return the full error message including the hint."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class ConfigurationError(TryCatchError):
    """Raised for invalid or unresolvable configuration."""


class RegistrationError(TryCatchError):
    """Raised when a Result type declaration conflicts with an existing one."""


class UnregisteredTypeError(RegistrationError):
    """Raised when a success type is used before it was declared."""


class ResultTypeError(TryCatchError, TypeError):
    """Raised when a value does not match the Result type it is used with."""


class ErrorPayloadError(TryCatchError, TypeError):
    """Raised when a thrown payload is None or not the configured error type."""


class NoResultContextError(TryCatchError):
    """Raised when a value-backend operator runs outside any home Result context."""


class UncaughtThrowError(TryCatchError):
    """Raised when the jump backend throws with no catch point on this thread.

    This is a precondition violation, not a recoverable error.
    """


class AbortHookReturnedError(TryCatchError):
    """Raised when a configured abort hook returned instead of terminating."""


class ForceUnwrapError(TryCatchError):
    """Raised by the ``raise`` abort action when force_unwrap hits an error."""

    def __init__(self, error: Any, hint: str | None = None):
        """Keep the payload that triggered the abort."""
        self.error = error
        super().__init__(f"force_unwrap on failed Result: {error!r}", hint=hint)
