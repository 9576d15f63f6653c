"""Joining several errors into one ordered error tree."""

from __future__ import annotations

from collections.abc import Iterable

from .markers import Collapsible
from .wrap import format_error


class JoinError(Exception):
    """Ordered aggregation of causes without a message of its own.

    Collapsible members (such as captured stack traces) are left out of the
    default text and only rendered by ``format_error(err, verbose=True)``.
    """

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: tuple[BaseException, ...] = tuple(errors)
        super().__init__(*self.errors)

    def __str__(self) -> str:
        return self.format_error(False)

    def unwrap_all(self) -> tuple[BaseException, ...]:
        """Return the joined causes in order."""
        return self.errors

    def format_error(self, verbose: bool) -> str:
        """Render members one per line, collapsible ones only when verbose."""
        lines: list[str] = []
        for err in self.errors:
            if not verbose and isinstance(err, Collapsible):
                continue
            lines.append(format_error(err, verbose=verbose))
        return "\n".join(lines)


def join(*errs: BaseException | None) -> BaseException | None:
    """Join errors, dropping ``None``; a single error is returned unchanged."""
    joined = [err for err in errs if err is not None]
    if not joined:
        return None
    if len(joined) == 1:
        return joined[0]
    return JoinError(joined)
