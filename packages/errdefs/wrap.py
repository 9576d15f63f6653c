"""Single-cause wrapping and error text rendering."""

from __future__ import annotations

from .markers import Collapsible


class WrappedError(Exception):
    """Exception adding context to exactly one cause."""

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(message, cause)
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}"

    def unwrap(self) -> BaseException:
        """Return the wrapped cause."""
        return self.cause

    def format_error(self, verbose: bool) -> str:
        """Render the context and the cause."""
        return f"{self.message}: {format_error(self.cause, verbose=verbose)}"


def wrap(err: BaseException, message: str) -> WrappedError:
    """Wrap ``err`` with context, rendered as ``"<message>: <err>"``."""
    return WrappedError(message, err)


def format_error(err: BaseException | None, *, verbose: bool = False) -> str:
    """Render error text, optionally including collapsible members.

    Default rendering matches ``str(err)``. Verbose rendering also includes
    stack traces and other collapsible members hidden from default text.
    """
    if err is None:
        return ""
    formatter = getattr(err, "format_error", None)
    if callable(formatter):
        return formatter(verbose)
    if isinstance(err, Collapsible) and not verbose:
        return ""
    return str(err)
