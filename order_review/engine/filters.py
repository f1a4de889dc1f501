"""
Filter Composer

Narrows an accepted-order collection down to the orders matching every
active criterion. The source sequence is never mutated and the result keeps
the source order.
"""

from typing import Callable, Sequence

from order_review.schemas import AcceptedOrder, FilterCriteria

Predicate = Callable[[AcceptedOrder], bool]


def build_predicates(criteria: FilterCriteria) -> list[Predicate]:
    """
    Build one predicate per active criterion.

    Cheapest first: exact category comparison, then the date comparison,
    then the lower-cased substring search.
    """
    predicates: list[Predicate] = []

    if criteria.category:
        category = criteria.category
        predicates.append(lambda order: order.category == category)

    if criteria.delivery_date_cutoff:
        cutoff = criteria.delivery_date_cutoff
        predicates.append(lambda order: order.delivery_date <= cutoff)

    if criteria.supplier_search_term:
        term = criteria.supplier_search_term.lower()
        predicates.append(lambda order: term in order.supplier_name.lower())

    return predicates


def apply_filters(
    orders: Sequence[AcceptedOrder],
    criteria: FilterCriteria,
) -> list[AcceptedOrder]:
    """Return the orders satisfying every active criterion (logical AND)."""
    predicates = build_predicates(criteria)
    if not predicates:
        return list(orders)
    return [order for order in orders if all(p(order) for p in predicates)]
