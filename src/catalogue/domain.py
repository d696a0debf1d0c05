"""Catalogue bounded context — products published by partners.

Owns product records and the atomic stock counters that carts and orders
draw from.
"""

import structlog
from protean.domain import Domain

catalogue = Domain(name="catalogue")

logger = structlog.get_logger(__name__)
