from dataclasses import dataclass
from enum import StrEnum


class Partition(StrEnum):
    """Storage subset selected by the character class of a code's first symbol."""

    UPPER = 'upper'
    LOWER = 'lower'
    DIGIT = 'digit'


# fmt: off
@dataclass(frozen=True)
class ShortLinkRecord:
    short_code: str     # Canonical 6-character code (ordinal bits zeroed)
    original_url: str   # Original long URL
    sequence: int = 0   # Collision ordinal among URLs sharing the fingerprint (0-15)
# fmt: on
