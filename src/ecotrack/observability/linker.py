"""Event linker private to ecotrack.

Subscribers register on EcotrackEventLinker rather than pyventus's global
EventLinker, so reset() can drop them without touching other pyventus users.
"""

from __future__ import annotations

from pyventus.events import EventLinker


class EcotrackEventLinker(EventLinker):
    pass
