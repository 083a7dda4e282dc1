"""Filename-safe slugs for people's names.

Report downloads embed the user's name in the suggested filename. Names
routinely carry accents and spaces, so they are folded to ASCII and joined
with hyphens before use.
"""

from __future__ import annotations

import re
import typing as typ
import unicodedata

if typ.TYPE_CHECKING:
    import datetime as dt

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def parameterize(value: str, separator: str = "-") -> str:
    """Fold ``value`` to a lowercase ASCII slug.

    Parameters
    ----------
    value:
        Free text, for example a user's display name.
    separator:
        String placed between alphanumeric runs.

    Returns
    -------
    str
        Slug with no leading or trailing separator. Empty when ``value``
        has no ASCII-foldable alphanumerics.

    Examples
    --------
    >>> parameterize("João da Silva")
    'joao-da-silva'
    >>> parameterize("  Ana  O'Neil ")
    'ana-o-neil'

    """
    decomposed = unicodedata.normalize("NFKD", value)
    ascii_text = decomposed.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_ALNUM.sub(separator, ascii_text).strip(separator)


def compact_date(value: dt.date) -> str:
    """Render a date as eight digits (``YYYYMMDD``).

    >>> import datetime as dt
    >>> compact_date(dt.date(2025, 9, 24))
    '20250924'

    """
    return value.strftime("%Y%m%d")
