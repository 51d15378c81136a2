from __future__ import annotations

from typing import Iterable, Iterator, List


class SimctlError(Exception):
    """Base class for errors reported at the command boundary."""


class QuantityError(SimctlError, ValueError):
    """Raised when a resource quantity string cannot be parsed."""

    def __init__(self, resource: str, value: str, reason: str) -> None:
        super().__init__(f"invalid quantity {value!r} for resource {resource!r}: {reason}")
        self.resource = resource
        self.value = value


class FixtureError(SimctlError):
    """Raised when generation stopped before producing every fixture."""

    def __init__(self, message: str, written: int) -> None:
        super().__init__(message)
        self.written = written


class WriteError(SimctlError):
    """Raised when the fixture stream cannot be persisted."""


class KubectlError(SimctlError):
    """Raised when a kubectl invocation fails."""


class NotFoundError(KubectlError):
    """Raised when the requested object does not exist on the server."""


class ReconcileError(SimctlError):
    """Raised when a batch cannot be reconciled at all."""


class AggregateError(SimctlError):
    """Several independent failures reported together, in input order."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: List[BaseException] = list(errors)
        super().__init__(self._render())

    def _render(self) -> str:
        if len(self.errors) == 1:
            return str(self.errors[0])
        return "[" + ", ".join(str(err) for err in self.errors) + "]"

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)


def add_source_to_error(verb: str, source: str, err: BaseException) -> SimctlError:
    """Prefix ``err`` with the action and the file it came from."""

    cls = type(err) if isinstance(err, SimctlError) else SimctlError
    if source:
        message = f'error when {verb} "{source}": {err}'
    else:
        message = str(err)
    try:
        wrapped = cls(message)
    except TypeError:
        wrapped = SimctlError(message)
    wrapped.__cause__ = err
    return wrapped


__all__ = [
    "AggregateError",
    "FixtureError",
    "KubectlError",
    "NotFoundError",
    "QuantityError",
    "ReconcileError",
    "SimctlError",
    "WriteError",
    "add_source_to_error",
]
