from __future__ import annotations

import itertools
import logging
from typing import Iterable, Iterator, List, Tuple

import numpy as np

from pledger_core.domain.models import Record, ScenarioOutcome, ScenarioResult


logger = logging.getLogger(__name__)

MAX_VARIABLE_ITEMS = 24
BLOCK_ITEMS = 16


def partition_records(records: Iterable[Record]) -> Tuple[float, List[Record]]:
    """
    Split records into the certain total and the uncertain items.
    Probability 0 never happens, probability 1 always does; only the rest is enumerated.
    """
    fixed_total = 0.0
    variable: List[Record] = []
    for record in records:
        if record.probability == 1.0:
            fixed_total += record.signed_amount
        elif record.probability > 0.0:
            variable.append(record)
    return fixed_total, variable


def iter_occurrence_patterns(n: int) -> Iterator[Tuple[bool, ...]]:
    """
    Yield every occurs/does-not-occur assignment for n items, 2**n in total.
    Order matches counting upward in binary with item i on bit i, so item 0 toggles fastest.
    """
    for bits in itertools.product((False, True), repeat=n):
        yield bits[::-1]


def occurrence_matrix(n: int) -> np.ndarray:
    """All 2**n occurrence patterns as rows of a (2**n, n) boolean matrix, in pattern order."""
    return np.array(list(iter_occurrence_patterns(n)), dtype=bool).reshape(2 ** n, n)


def evaluate_scenarios(records: Iterable[Record], max_variable_items: int = MAX_VARIABLE_ITEMS) -> ScenarioResult:
    """
    Exhaustive what-if over independent items.
    - Best/worst: extreme net outcomes across all occurrence patterns.
    - Most/least likely: outcome of the pattern with the highest/lowest joint probability.
    Ties keep the first pattern seen.

    The lowest BLOCK_ITEMS items are evaluated as one vectorised block; each pattern of
    the remaining items shifts that block. Blocks run in pattern order, and argmax/argmin
    return the first index, so ties resolve exactly as a pattern-by-pattern scan would.
    """
    fixed_total, variable = partition_records(records)
    n = len(variable)
    if n > max_variable_items:
        raise ValueError(
            f"{n} uncertain items would need {2 ** n} combinations; limit is {max_variable_items} items"
        )

    signed = np.array([r.signed_amount for r in variable], dtype=float)
    probs = np.array([r.probability for r in variable], dtype=float)

    k = min(n, BLOCK_ITEMS)
    low = occurrence_matrix(k)
    low_outcomes = fixed_total + low.astype(float) @ signed[:k]
    low_likelihoods = np.prod(np.where(low, probs[:k], 1.0 - probs[:k]), axis=1)
    high_signed = signed[k:]
    high_probs = probs[k:]

    best = -np.inf
    worst = np.inf
    most_likely = ScenarioOutcome(total=fixed_total, probability=-1.0)
    least_likely = ScenarioOutcome(total=fixed_total, probability=np.inf)
    combinations = 0

    for pattern in iter_occurrence_patterns(n - k):
        occurs = np.array(pattern, dtype=bool)
        outcomes = low_outcomes + high_signed[occurs].sum()
        likelihoods = low_likelihoods * np.prod(np.where(occurs, high_probs, 1.0 - high_probs))
        combinations += len(outcomes)

        best = max(best, float(outcomes.max()))
        worst = min(worst, float(outcomes.min()))
        i = int(np.argmax(likelihoods))
        if likelihoods[i] > most_likely.probability:
            most_likely = ScenarioOutcome(total=float(outcomes[i]), probability=float(likelihoods[i]))
        j = int(np.argmin(likelihoods))
        if likelihoods[j] < least_likely.probability:
            least_likely = ScenarioOutcome(total=float(outcomes[j]), probability=float(likelihoods[j]))

    logger.debug("Evaluated %d combinations over %d uncertain items", combinations, n)
    return ScenarioResult(
        fixed_total=fixed_total,
        variable_count=n,
        combinations=combinations,
        best_case=float(best),
        worst_case=float(worst),
        most_likely=most_likely,
        least_likely=least_likely,
    )
