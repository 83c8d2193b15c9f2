"""
Errors raised while waiting for the management cluster to converge.
"""
from typing import Optional


class ReadinessError(Exception):
    """A target is not ready yet. Always retryable."""

    def __init__(self, target: str, detail: str):
        self.target = target
        self.detail = detail
        super().__init__(f"{self.kind} {target}: {detail}")

    @property
    def kind(self) -> str:
        return type(self).__name__


class QueryError(ReadinessError):
    """The cluster state query itself failed."""


class InsufficientReplicas(ReadinessError):
    pass


class Terminating(ReadinessError):
    pass


class NameMismatch(ReadinessError):
    pass


class NotReady(ReadinessError):
    pass


class TemplateNotReported(ReadinessError):
    pass


class TemplateInvalid(ReadinessError):
    pass


class ConvergenceTimeout(Exception):
    """Raised once the timeout budget is spent without a passing tick."""

    def __init__(self, description: str, timeout: float, attempts: int,
                 last_error: Optional[ReadinessError]):
        self.description = description
        self.timeout = timeout
        self.attempts = attempts
        self.last_error = last_error
        reason = str(last_error) if last_error is not None else "no attempt completed"
        super().__init__(
            f"{description} did not converge within {timeout:g}s "
            f"after {attempts} attempt(s): {reason}"
        )


class CommandError(Exception):
    """A shell command exited unsuccessfully."""

    def __init__(self, command: str, returncode: Optional[int], output: str):
        self.command = command
        self.returncode = returncode
        self.output = output
        status = f"exit code {returncode}" if returncode is not None else "timed out"
        super().__init__(f"{command} failed ({status}): {output.strip()}")
