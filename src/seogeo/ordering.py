"""Canonical ordering of score breakdowns for display and persistence."""

from typing import Iterable, Sequence

from seogeo.models import ScoreFactor


def order_factors(
    factors: Iterable[ScoreFactor], canonical_order: Sequence[str]
) -> tuple[ScoreFactor, ...]:
    """Re-sort factors into a fixed canonical sequence.

    Factors whose name is not in canonical_order are dropped, and canonical
    names missing from the input are skipped rather than synthesized. When a
    name occurs more than once the last entry wins.

    Args:
        factors: Factors in any order
        canonical_order: Factor names in display order

    Returns:
        Tuple of factors in canonical order
    """
    by_name = {factor.name: factor for factor in factors}
    return tuple(by_name[name] for name in canonical_order if name in by_name)
