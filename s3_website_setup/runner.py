import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .errors import SetupError

logger = logging.getLogger(__name__)


class State(enum.Enum):
    START = "start"
    TOOL_CHECKED = "tool-checked"
    AUTHENTICATED = "authenticated"
    EXISTENCE_KNOWN = "existence-known"
    CREATED = "created"
    SKIPPED = "skipped"
    WEBSITE_CONFIGURED = "website-configured"
    PUBLIC_ACCESS_CONFIGURED = "public-access-configured"
    POLICY_APPLIED = "policy-applied"
    CORS_ATTEMPTED = "cors-attempted"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Step:
    name: str
    # May return a State to replace ``state``, e.g. SKIPPED instead of CREATED
    action: Callable[[], Optional[State]]
    state: State
    fatal: bool = True
    failure: Optional[str] = None


@dataclass
class RunResult:
    state: State
    history: List[State] = field(default_factory=list)
    error: Optional[SetupError] = None
    failed_step: Optional[Step] = None
    warnings: List[SetupError] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        if self.error is None:
            return 0
        return self.error.exit_code

    @property
    def ok(self) -> bool:
        return self.error is None


class Runner:
    """
    Executes steps in order, stopping at the first fatal SetupError.

    Errors from non-fatal steps are collected as warnings and the run
    advances to that step's state as if it had succeeded. Exceptions that
    are not SetupError propagate to the caller untouched.
    """

    def __init__(self, steps: List[Step], on_warning=None):
        self.steps = steps
        self.on_warning = on_warning

    def run(self) -> RunResult:
        result = RunResult(state=State.START, history=[State.START])
        for step in self.steps:
            logger.debug("Step %s from %s", step.name, result.state.value)
            try:
                reached = step.action() or step.state
            except SetupError as error:
                if step.fatal:
                    result.error = error
                    result.failed_step = step
                    result.state = State.FAILED
                    result.history.append(State.FAILED)
                    return result
                result.warnings.append(error)
                if self.on_warning is not None:
                    self.on_warning(step, error)
                reached = step.state
            result.state = reached
            result.history.append(reached)
        return result
