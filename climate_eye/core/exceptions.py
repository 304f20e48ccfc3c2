"""Unified exception taxonomy.

Every domain exception derives from ``ClimateEyeError`` and carries the
component it came from (``stage``), a machine-readable ``code`` and a
``retryable`` flag, so the host can pick a banner or a log level without
matching on exception types.

Categories (class, meaning, retryable):

- ``ValidationError``: bad input or a refused state transition; never.
- ``TransientError``: network or provider hiccup; by default.
- ``PermanentError``: a failure a retry will not fix; no.
- ``ContractError``: transfer payload drift between screens; never.

``to_error_dict()`` gives the stable structured form used in logs and
error banners.
"""

from __future__ import annotations


class ClimateEyeError(Exception):
    """Base exception for all Climate Eye domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (e.g. ``"parse_kml"``, ``"fetch"``).
        code: Machine-readable error code (e.g. ``"GEOMETRY_PARSE_FAILED"``).
        retryable: Whether repeating the same user action may succeed.
    """

    #: Stage and code used when the raiser does not pass one.
    default_stage: str = ""
    default_code: str = ""
    #: Fixed category of a category base class; empty means "decide by retryable".
    category_name: str = ""
    #: ``retryable`` used when the raiser does not pass one.
    default_retryable: bool = False

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = self.default_retryable if retryable is None else retryable

    @property
    def category(self) -> str:
        if self.category_name:
            return self.category_name
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Structured payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(ClimateEyeError):
    """Bad input or a refused state transition."""

    category_name = "validation"


class TransientError(ClimateEyeError):
    """Temporary failure; the same action may succeed later."""

    category_name = "transient"
    default_retryable = True


class PermanentError(ClimateEyeError):
    """Failure a retry will not fix."""

    category_name = "permanent"


class ContractError(ClimateEyeError):
    """Transfer payload or schema drift between screens."""

    category_name = "contract"
