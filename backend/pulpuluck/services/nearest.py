from typing import Sequence

from pulpuluck.models.fountain_model import Fountain, GeoPoint, NearestResult
from pulpuluck.services.geo import distance


def find_nearest(origin: GeoPoint, candidates: Sequence[Fountain]) -> NearestResult | None:
    """
    Linear scan for the fountain closest to ``origin``.
    On equal distances the earliest candidate wins.
    """
    nearest = None
    shortest = float("inf")

    for fountain in candidates:
        d = distance(origin, fountain.location)
        if d < shortest:
            shortest = d
            nearest = fountain

    if nearest is None:
        return None
    return NearestResult(fountain=nearest, distance_m=shortest)
