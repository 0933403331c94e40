"""Snap image dimensions to the closest supported aspect ratio."""

from merry_style.domain.hats import DEFAULT_ASPECT_RATIO, AspectRatio


def classify_aspect_ratio(width: int, height: int) -> AspectRatio:
    """Return the bucket whose ratio is nearest to ``width / height``.

    Buckets are compared in declaration order with a strict ``<``, so the
    earlier bucket wins a tie.
    """
    if width <= 0 or height <= 0:
        return DEFAULT_ASPECT_RATIO
    ratio = width / height
    buckets = list(AspectRatio)
    closest = buckets[0]
    for candidate in buckets[1:]:
        if abs(candidate.ratio - ratio) < abs(closest.ratio - ratio):
            closest = candidate
    return closest
