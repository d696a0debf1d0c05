"""Identity bounded context — user accounts and roles.

Authentication happens upstream; this context only knows who a caller is
and which role they hold.
"""

import structlog
from protean.domain import Domain

identity = Domain(name="identity")

logger = structlog.get_logger(__name__)
