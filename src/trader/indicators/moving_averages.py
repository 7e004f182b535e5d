"""Simple, exponential and weighted moving averages.

Every function returns one value per complete window, so the output is
``len(values) - period + 1`` long. Inputs shorter than ``period`` (or a
non-positive period) produce an empty list rather than a partial result.
"""

from collections.abc import Sequence


def sma(values: Sequence[float], period: int) -> list[float]:
    """Simple moving average, each window summed on its own.

    A non-finite value only affects the windows that contain it.

    Args:
        values: Ordered series (oldest first).
        period: Window length.

    Returns:
        List of window means, empty if ``len(values) < period``.
    """
    if period <= 0 or len(values) < period:
        return []

    return [sum(values[end - period : end]) / period for end in range(period, len(values) + 1)]


def ema(values: Sequence[float], period: int) -> list[float]:
    """Exponential moving average seeded with the first ``period``-SMA.

    Recurrence after the seed::

        k = 2 / (period + 1)
        ema[i] = value[i] * k + ema[i-1] * (1 - k)

    Args:
        values: Ordered series (oldest first).
        period: Smoothing period.

    Returns:
        List of EMA values aligned with the end of each window, empty if
        ``len(values) < period``.
    """
    if period <= 0 or len(values) < period:
        return []

    k = 2.0 / (period + 1)
    result = [sum(values[:period]) / period]
    for value in values[period:]:
        result.append(value * k + result[-1] * (1.0 - k))
    return result


def wma(values: Sequence[float], period: int) -> list[float]:
    """Linearly weighted moving average (newest value weighted ``period``)."""
    if period <= 0 or len(values) < period:
        return []

    denominator = period * (period + 1) / 2
    result = []
    for end in range(period, len(values) + 1):
        window = values[end - period : end]
        weighted = sum(value * (i + 1) for i, value in enumerate(window))
        result.append(weighted / denominator)
    return result
