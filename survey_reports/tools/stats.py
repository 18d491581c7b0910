import pandas as pd
import numpy as np
from typing import Any, Dict, Hashable, Optional, Sequence, Union

Number = Union[int, float]


def average(numbers: Sequence[Number]) -> float:
    """
    Arithmetic mean of a numeric sequence.

    Args:
        numbers: Numeric values (already filtered by the caller).

    Returns:
        float: The mean, or 0 for an empty input (fail-soft, not an error).
    """
    if len(numbers) == 0:
        return 0
    return float(np.mean(np.asarray(numbers, dtype=float)))


def median(numbers: Sequence[Number]) -> float:
    """
    Median of a numeric sequence.

    Odd counts return the middle element of the sorted values, even counts the
    mean of the two middle elements.

    Returns:
        float: The median, or 0 for an empty input.
    """
    if len(numbers) == 0:
        return 0
    return float(np.median(np.asarray(numbers, dtype=float)))


def distribution(values: Sequence[Hashable]) -> Dict[Any, int]:
    """
    Frequency table of the observed values.

    Every distinct value appears as a key (count 1 included). Keys keep the
    order in which values were first seen, which `mode` relies on.

    Args:
        values: Strings or numbers.

    Returns:
        Dict: {value: count}.
    """
    if len(values) == 0:
        return {}

    # factorize numbers uniques in order of appearance
    codes, uniques = pd.factorize(np.asarray(list(values), dtype=object))
    counts = np.bincount(codes[codes >= 0], minlength=len(uniques))
    return {u: int(c) for u, c in zip(uniques, counts)}


def mode(values: Sequence[Hashable]) -> Optional[Any]:
    """
    Most frequent value.

    Ties are broken by first-seen order in the input, so ["x", "y"] gives "x".

    Returns:
        The most frequent value, or None for an empty input.
    """
    dist = distribution(values)
    if not dist:
        return None
    # max() keeps the first maximal key; dict order is first-seen order.
    return max(dist, key=dist.get)


def value_range(numbers: Sequence[Number]) -> Dict[str, Number]:
    """
    Minimum and maximum of a numeric sequence.

    Raises:
        ValueError: On empty input; callers guard against it.
    """
    if len(numbers) == 0:
        raise ValueError("value_range() requires at least one value")
    return {"min": min(numbers), "max": max(numbers)}


def percentage(count: Number, total: Number) -> float:
    # Share of total in percent; 0 when there is nothing to share.
    if not total:
        return 0.0
    return (count / total) * 100


def round_to(value: Number, decimals: int = 2) -> float:
    return float(round(value, decimals))
