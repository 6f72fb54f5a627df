"""Handler lifecycle transitions shared by every gateway operation."""

IDLE = "IDLE"
VALIDATING = "VALIDATING"
DELEGATING = "DELEGATING"
SUCCEEDED = "SUCCEEDED"
FAILED = "FAILED"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    IDLE: {VALIDATING},
    VALIDATING: {DELEGATING, FAILED},
    DELEGATING: {SUCCEEDED, FAILED},
    SUCCEEDED: set(),
    FAILED: set(),
}


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


class HandlerRun:
    """Tracks one handler invocation through the lifecycle."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.state = IDLE
        self.history: list[str] = [IDLE]

    def advance(self, new: str) -> None:
        validate_transition(self.state, new)
        self.state = new
        self.history.append(new)

    @property
    def finished(self) -> bool:
        return self.state in (SUCCEEDED, FAILED)
