"""
Ristorante API: Closed Vocabularies
====================================

What:  Enumerations for every string field the API validates against a fixed
       set: allergen tags, reservation statuses and image extensions.
How:   Raw strings are converted at the edge (schemas, image service); past
       that point only enum members circulate. Values are stored as plain
       strings in the database.
"""

import enum
from typing import Iterable, List, Optional


class Allergen(str, enum.Enum):
    """The fourteen EU-regulated allergens, tagged in Italian."""

    GLUTINE = "glutine"
    CROSTACEI = "crostacei"
    UOVA = "uova"
    PESCE = "pesce"
    ARACHIDI = "arachidi"
    SOIA = "soia"
    LATTE = "latte"
    FRUTTA_A_GUSCIO = "frutta_a_guscio"
    SEDANO = "sedano"
    SENAPE = "senape"
    SESAMO = "sesamo"
    SOLFITI = "solfiti"
    LUPINI = "lupini"
    MOLLUSCHI = "molluschi"


def normalize_allergens(raw: Optional[Iterable]) -> List[Allergen]:
    """
    Turns caller-supplied tags into a clean allergen set.

    Lower-cases and trims each entry, drops anything outside the vocabulary
    (including non-strings) and removes duplicates, keeping first-seen order.
    A bare string counts as a one-element list; None or any other non-list
    value yields an empty set.

    >>> normalize_allergens(["Glutine", " sedano", "glutine", "invalid"])
    [<Allergen.GLUTINE: 'glutine'>, <Allergen.SEDANO: 'sedano'>]
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    elif not isinstance(raw, (list, tuple, set, frozenset)):
        return []

    known = {a.value: a for a in Allergen}
    result: List[Allergen] = []
    for entry in raw:
        if not isinstance(entry, str):
            continue
        allergen = known.get(entry.strip().lower())
        if allergen is not None and allergen not in result:
            result.append(allergen)
    return result


class ReservationStatus(str, enum.Enum):
    """Reservation lifecycle. Public submissions always start at NEW."""

    NEW = "new"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ImageExtension(str, enum.Enum):
    """Upload formats the gallery accepts."""

    JPG = "jpg"
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @classmethod
    def from_filename(cls, filename: Optional[str]) -> Optional["ImageExtension"]:
        """
        Extension after the last dot, lower-cased; no dot means `jpg`.

        Returns None for anything outside the accepted set.
        """
        name = filename or ""
        ext = name.rsplit(".", 1)[1].lower() if "." in name else cls.JPG.value
        try:
            return cls(ext)
        except ValueError:
            return None

    @property
    def content_type(self) -> str:
        if self is ImageExtension.PNG:
            return "image/png"
        if self is ImageExtension.WEBP:
            return "image/webp"
        return "image/jpeg"
