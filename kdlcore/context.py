"""kdlcore/context.py – labelled sub-parsers.

Every grammar production is a callable ``(pos, ...) -> (new_pos, result)``
that raises :class:`~kdlcore.errors.KdlParseError` on failure.
:func:`context` wraps such a callable so that a failure leaving it picks up
a static :class:`~kdlcore.errors.ContextLabel`::

    @context(ContextLabel.VALUE)
    def _value(self, pos):
        ...

    pos, text = context(ContextLabel.STRING)(self._string)(pos)

Labelling never replaces a label that an inner production already set, and
never touches a conversion cause.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Tuple, TypeVar

from .errors import ContextLabel, KdlParseError

T = TypeVar("T")

SubParser = Callable[..., Tuple[int, T]]


def context(label: ContextLabel) -> Callable[[SubParser[T]], SubParser[T]]:
    """Return a decorator labelling failures of a sub-parser with *label*."""

    def decorate(parser: SubParser[T]) -> SubParser[T]:
        @functools.wraps(parser)
        def labelled(*args: Any, **kwargs: Any) -> Tuple[int, T]:
            try:
                return parser(*args, **kwargs)
            except KdlParseError as err:
                raise err.add_context(label) from None

        return labelled

    return decorate
