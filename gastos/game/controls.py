"""Input mapping for the tile game: keys and swipe gestures to directions."""

from ..utils import config

# Browser `KeyboardEvent.key` values and single-letter fallbacks
KEY_DIRECTIONS = {
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "ArrowUp": "up",
    "ArrowDown": "down",
    "a": "left",
    "d": "right",
    "w": "up",
    "s": "down",
}


def direction_for_key(key):
    """Return the direction bound to `key`, or None if it is not a move key."""
    if not isinstance(key, str):
        return None
    if key in KEY_DIRECTIONS:
        return KEY_DIRECTIONS[key]
    return KEY_DIRECTIONS.get(key.lower()) if len(key) == 1 else None


def classify_swipe(dx, dy, threshold=None):
    """
    Turn a swipe displacement into a direction.

    Swipes shorter than `threshold` on both axes are ignored (None). The
    dominant axis wins; equal displacement counts as vertical. Screen
    coordinates grow rightward and downward.
    """
    threshold = config.SWIPE_THRESHOLD if threshold is None else threshold
    abs_x, abs_y = abs(dx), abs(dy)
    if max(abs_x, abs_y) < threshold:
        return None
    if abs_x > abs_y:
        return "right" if dx > 0 else "left"
    return "down" if dy > 0 else "up"
