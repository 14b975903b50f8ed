"""
Ristorante API: ORM Models
===========================

Importing this package registers every table with `Base.metadata`
(used by Alembic's env.py).
"""

from ristorante.models.menu_item import MenuItem
from ristorante.models.reservation import Reservation
from ristorante.models.site_page import SitePage

__all__ = ["MenuItem", "Reservation", "SitePage"]
