"""Match document basenames against a date pattern and order them."""

from collections.abc import Iterable
from datetime import datetime

from ..storage.models import DatedDocument, Document, SortDirection
from .pattern import DatePattern

DateKey = datetime


def match(basename: str, pattern: DatePattern | str) -> DateKey | None:
    """Return the date a basename denotes under the pattern, or None.

    The basename is accepted only if formatting the parsed date with the same
    pattern reproduces it exactly.
    """
    if isinstance(pattern, str):
        pattern = DatePattern(pattern)
    return pattern.match(basename)


def aggregate(
    documents: Iterable[Document],
    pattern: DatePattern | str,
    direction: SortDirection = SortDirection.DESCENDING,
) -> list[DatedDocument]:
    """Keep documents whose basename matches and sort them by date.

    The sort is stable in both directions: documents sharing a date keep
    their input order.
    """
    if isinstance(pattern, str):
        pattern = DatePattern(pattern)

    dated = []
    for document in documents:
        key = pattern.match(document.basename)
        if key is not None:
            dated.append(DatedDocument(document=document, key=key))

    return sorted(
        dated,
        key=lambda d: d.key,
        reverse=direction is SortDirection.DESCENDING,
    )
