"""
Completion helpers.
"""

from typing import Iterable, List, Optional


def filter_prefix(candidates: Iterable[Optional[str]], prefix: Optional[str]) -> List[str]:
    """Return the candidates that start with ``prefix``, ignoring case.

    Input order and duplicates are kept and ``None`` candidates are skipped.
    A ``None`` prefix matches nothing, while an empty prefix matches everything.

    Args:
        candidates: Strings to filter
        prefix: The partially typed token

    Returns:
        A new list with the matching candidates
    """
    if prefix is None:
        return []

    needle = prefix.lower()
    return [
        candidate for candidate in candidates
        if candidate is not None and candidate.lower().startswith(needle)
    ]
