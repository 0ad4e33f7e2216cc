# backend/modules/promotions/services/code_matching.py

from typing import Iterable, Optional

DEFAULT_MAX_DISTANCE = 2


def normalize_code(code: str) -> str:
    """Trim and lower-case a promo code for comparison"""
    if not isinstance(code, str):
        raise TypeError(f"Promo code must be a string, got {type(code).__name__}")
    return code.strip().lower()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings"""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Keep the shorter string as the row
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + (char_a != char_b),  # substitution
                )
            )
        previous = current

    return previous[-1]


def suggest_code(
    code: str,
    candidates: Iterable[str],
    max_distance: int = DEFAULT_MAX_DISTANCE,
) -> Optional[str]:
    """
    Find the known code closest to a mistyped one

    Args:
        code: Code as entered by the customer
        candidates: Known codes, in preference order for ties
        max_distance: Largest edit distance still worth suggesting

    Returns:
        The candidate's original spelling, or None when nothing is close
    """
    target = normalize_code(code)
    if not target:
        return None

    best = None
    best_distance = max_distance + 1

    for candidate in candidates:
        distance = edit_distance(target, normalize_code(candidate))
        # An exact match is not a suggestion
        if distance == 0:
            continue
        if distance < best_distance:
            best = candidate
            best_distance = distance

    return best
