"""Shared typed models for the enrichment pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Form fields the enrichment source can fill, in merge order
ENRICHABLE_FIELDS: tuple[str, ...] = ("manufacturer", "name", "scale", "imageUrl")

# imageUrl values starting with this prefix carry a reason instead of a URL
MANUAL_EXTRACT_PREFIX = "MANUAL_EXTRACT:"


class NotificationKind(Enum):
    """Severity of a user-facing notification."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    """One message for the notification sink."""

    kind: NotificationKind
    text: str


@dataclass(frozen=True, slots=True)
class EnrichmentResult:
    """Normalized response from the enrichment endpoint.

    ``fields`` only holds keys the server actually returned; absent fields
    are omitted, never defaulted. ``server_error`` marks a non-OK HTTP
    response so it can be told apart from an OK response without data.
    """

    success: bool
    fields: dict[str, str] = field(default_factory=dict)
    message: str | None = None
    server_error: bool = False

    @property
    def has_fields(self) -> bool:
        """True when at least one enrichable field carries a non-blank value."""
        if not self.success:
            return False
        return any(
            isinstance(self.fields.get(name), str) and self.fields[name].strip() for name in ENRICHABLE_FIELDS
        )


class OutcomeKind(Enum):
    """How a live, current request settled."""

    TRANSPORT_ERROR = "transport_error"
    SERVER_ERROR = "server_error"
    EMPTY_RESULT = "empty_result"
    NO_OP_MERGE = "no_op_merge"
    PARTIAL_MERGE = "partial_merge"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Settlement of a request: either a result or the error that replaced it."""

    generation: int
    trigger_value: str
    result: EnrichmentResult | None = None
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.result is None


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    """Fields written by one merge."""

    populated_fields: tuple[str, ...] = ()

    @property
    def populated_count(self) -> int:
        return len(self.populated_fields)


# === imageUrl variant ===


@dataclass(frozen=True, slots=True)
class Populated:
    """An imageUrl that holds a plain value."""

    value: str

    def to_wire(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RequiresManualAction:
    """An imageUrl the source could not extract; the user must supply it."""

    reason: str

    def to_wire(self) -> str:
        return f"{MANUAL_EXTRACT_PREFIX}{self.reason}"


ImageReference = Populated | RequiresManualAction


def parse_image_reference(value: str) -> ImageReference:
    """Interpret a wire imageUrl, splitting off the MANUAL_EXTRACT: sentinel."""
    if value.startswith(MANUAL_EXTRACT_PREFIX):
        return RequiresManualAction(reason=value[len(MANUAL_EXTRACT_PREFIX) :])
    return Populated(value=value)
