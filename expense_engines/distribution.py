"""
Distribution helpers used by the expense form when switching split methods.

Pure functions with deterministic behavior. No I/O.

Usage:
    from expense_engines.distribution import even_percentage_basis_points

    even_percentage_basis_points(3)   # [3334, 3333, 3333]
"""

from __future__ import annotations

from collections.abc import Sequence

from expense_kernel.domain.expense import BASIS_POINTS_TOTAL, ExpenseSplit, MemberId


def even_percentage_basis_points(member_count: int) -> list[int]:
    """
    Basis points for an even split between ``member_count`` members.

    The result sums to 10000; leftover points go to the first members.
    Returns ``[]`` for a non-positive count.
    """
    if member_count <= 0:
        return []
    base, remainder = divmod(BASIS_POINTS_TOTAL, member_count)
    return [base + (1 if i < remainder else 0) for i in range(member_count)]


def percentage_to_amount_cents(total_amount_cents: int, basis_points: int) -> int:
    """
    Display-only amount for a percentage, rounded half-up.

    Use ``AllocationEngine.allocate`` for real splits; rounding each share
    independently does not conserve the total.
    """
    return (total_amount_cents * basis_points * 2 + BASIS_POINTS_TOTAL) // (
        2 * BASIS_POINTS_TOTAL
    )


def derive_percentages_from_amounts(
    splits: Sequence[ExpenseSplit],
    total_amount_cents: int,
) -> list[tuple[MemberId, int]]:
    """
    Basis points per member derived from existing amounts.

    Used to keep the current distribution when a user switches an expense
    from an amount-based method to percentages. Each share is floored and
    the leftover points go to the largest remainders, ties by input order,
    so amounts that sum to ``total_amount_cents`` yield exactly 10000.
    With a zero total the members get an even split instead.
    """
    if total_amount_cents == 0:
        even = even_percentage_basis_points(len(splits))
        return [(s.member_id, bps) for s, bps in zip(splits, even)]

    points: list[int] = []
    fractions: list[int] = []
    for split in splits:
        whole, fraction = divmod(split.amount_cents * BASIS_POINTS_TOTAL, total_amount_cents)
        points.append(whole)
        fractions.append(fraction)

    leftover = BASIS_POINTS_TOTAL - sum(points)
    by_fraction = sorted(range(len(splits)), key=lambda i: -fractions[i])
    for i in by_fraction[: max(leftover, 0)]:
        points[i] += 1

    return [(s.member_id, bps) for s, bps in zip(splits, points)]
