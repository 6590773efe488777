"""Smiley rating scale used by the survey frontend and the dashboard."""

from collections.abc import Mapping

# Least to most favourable.
RATING_WEIGHTS: dict[str, int] = {
    "rood": 1,
    "beige": 2,
    "geel": 3,
    "lichtgroen": 4,
    "groen": 5,
}

RATING_LABELS: dict[str, str] = {
    "rood": "Helemaal niet leuk",
    "beige": "Niet leuk",
    "geel": "Gewoon",
    "lichtgroen": "Leuk",
    "groen": "Heel leuk",
}


def weighted_average(counts: Mapping[str, int]) -> float | None:
    """Frequency-weighted mean over the rated tokens in ``counts``.

    Tokens outside the rating scale count toward neither side of the
    fraction. Returns ``None`` when nothing rated is left: "no answers"
    and "an average of zero" are different things on a chart.
    """
    weighted_sum = 0
    rated = 0
    for token, count in counts.items():
        weight = RATING_WEIGHTS.get(token)
        if weight is None or count <= 0:
            continue
        weighted_sum += weight * count
        rated += count
    if rated == 0:
        return None
    return round(weighted_sum / rated, 2)
