"""Status label normalization."""

import unicodedata


def normalize_status(label: str | None) -> str:
    """Reduce a status label to its column key.

    Lower-cases, strips accents and surrounding whitespace, so
    "En Revisión " and "en revision" land in the same column.
    """
    if label is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(label).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()
