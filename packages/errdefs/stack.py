"""Call-stack capture attached to errors as a collapsible join member.

A capture records raw frames only; names, files and lines are decoded the
first time the trace is read. Captures are hidden from default error text and
only rendered by ``format_error(err, verbose=True)`` or ``stack_trace()``.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from contextvars import ContextVar, Token
from types import CodeType, TracebackType

from pydantic import BaseModel, Field

from . import typeurl
from .chain import as_
from .config import get_settings
from .join import join as join_errors
from .wrap import wrap

_RawFrame = tuple[CodeType, int, str]

_HELPERS: ContextVar[frozenset[str]] = ContextVar(
    "errdefs_stack_helpers", default=frozenset()
)


class Frame(BaseModel):
    """One decoded frame of a trace."""

    name: str
    file: str
    line: int

    def render(self) -> str:
        """Return the frame as a name line and an indented location line."""
        return f"{self.name}\n\t{self.file}:{self.line}\n"


class Trace(BaseModel):
    """Decoded call stack plus identity of the process that captured it."""

    version: str = ""
    revision: str = ""
    cmdline: list[str] = Field(default_factory=list)
    frames: list[Frame] = Field(default_factory=list)
    pid: int = 0

    def render(self) -> str:
        """Return the process header, every frame and a trailing blank line."""
        header = f"{self.pid} {self.version} {' '.join(self.cmdline)}\n"
        return header + "".join(frame.render() for frame in self.frames) + "\n"


class StackError(Exception):
    """Collapsible error node carrying one captured call stack."""

    def __init__(
        self,
        raw: Iterable[_RawFrame] = (),
        helpers: frozenset[str] = frozenset(),
        *,
        trace: Trace | None = None,
    ) -> None:
        super().__init__()
        self._raw: tuple[_RawFrame, ...] = tuple(raw)
        self._helpers = helpers
        self._decoded: Trace | None = trace

    @property
    def depth(self) -> int:
        """Return the number of raw frames captured."""
        return len(self._raw)

    def stack_trace(self) -> Trace:
        """Return the decoded trace, decoding it on first use."""
        decoded = self._decoded
        if decoded is None:
            decoded = self._decode()
            # Published by one assignment; racing readers build equal traces.
            self._decoded = decoded
        return decoded

    def _decode(self) -> Trace:
        """Resolve raw frames into named frames, skipping helper functions."""
        frames = []
        for code, line, module in self._raw:
            name = _frame_name(code, module)
            if name in self._helpers:
                continue
            frames.append(Frame(name=name, file=code.co_filename, line=line))
        process = get_settings().process
        return Trace(
            version=process.version,
            revision=process.revision,
            cmdline=list(sys.argv),
            frames=frames,
            pid=os.getpid(),
        )

    def __str__(self) -> str:
        return self.stack_trace().render()

    def format_error(self, verbose: bool) -> str:
        """Render the trace only in verbose mode."""
        return self.stack_trace().render() if verbose else ""

    def collapse_error(self) -> None:
        """Mark the error as omitted from default error text."""

    def to_json(self) -> bytes:
        """Serialize the decoded trace."""
        return self.stack_trace().model_dump_json().encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes) -> StackError:
        """Rebuild a capture from a serialized trace."""
        return cls(trace=Trace.model_validate_json(data))


typeurl.register(StackError, "errdefs", "stack+json")


def _frame_name(code: CodeType, module: str) -> str:
    """Return the dotted name used for frames and helper matching."""
    return f"{module}.{code.co_qualname}"


def callers(skip: int = 0) -> StackError:
    """Capture the stack starting at the caller of ``callers``.

    ``skip`` drops that many more frames. The depth is bounded by the
    ``stack.max_depth`` setting; a stack shallower than ``skip`` yields an
    empty capture.
    """
    try:
        frame = sys._getframe(skip + 1)
    except ValueError:
        return StackError(helpers=_HELPERS.get())

    raw: list[_RawFrame] = []
    limit = get_settings().stack.max_depth
    while frame is not None and len(raw) < limit:
        module = frame.f_globals.get("__name__", "")
        raw.append((frame.f_code, frame.f_lineno or 0, module))
        frame = frame.f_back
    return StackError(raw, _HELPERS.get())


def err_stack() -> StackError:
    """Capture the stack of the function calling ``err_stack``."""
    return callers(1)


def has_stack(err: BaseException | None) -> bool:
    """Return whether any node in the tree is a stack capture."""
    return as_(err, StackError) is not None


def join(*errs: BaseException | None) -> BaseException | None:
    """Join errors and add a stack capture unless one is already present.

    Default text is the same as ``join.join``; the capture only shows up in
    verbose formatting.
    """
    return _attach(join_errors(*errs))


def with_stack(err: BaseException | None) -> BaseException | None:
    """Return ``err`` with a stack capture added unless it already has one."""
    return _attach(err)


def errorf(
    fmt: str, *args: object, cause: BaseException | None = None
) -> BaseException:
    """Build an error from a ``%``-format message and attach a stack capture.

    With ``cause`` the message wraps it, rendered as ``"<message>: <cause>"``.
    """
    message = fmt % args if args else fmt
    err = Exception(message) if cause is None else wrap(cause, message)
    return join_errors(err, callers(1))


def _attach(err: BaseException | None) -> BaseException | None:
    """Join a capture of the public function's caller onto ``err``."""
    if err is None or has_stack(err):
        return err
    # Skips _attach and the public function that called it.
    return join_errors(err, callers(2))


class _HelperScope:
    """Registers the function entering the block as a stack helper."""

    def __init__(self) -> None:
        self._token: Token[frozenset[str]] | None = None

    def __enter__(self) -> _HelperScope:
        caller = sys._getframe(1)
        name = _frame_name(caller.f_code, caller.f_globals.get("__name__", ""))
        self._token = _HELPERS.set(_HELPERS.get() | {name})
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _HELPERS.reset(self._token)
            self._token = None


def with_helper() -> _HelperScope:
    """Return a context manager eliding the calling function from traces.

    Wrap the body of a thin error-building helper so traces start at the
    helper's caller:

        def not_found(name):
            with with_helper():
                return with_stack(NotFoundError(name))
    """
    return _HelperScope()
