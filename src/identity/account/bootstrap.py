"""Administrator bootstrap, run once at provisioning time."""

import structlog

from identity.account.account import Role, User
from identity.domain import identity

logger = structlog.get_logger(__name__)


def bootstrap_admin(email: str, name: str = "Administrator") -> User:
    """Create the administrator record, or promote an existing account with that email.

    Running it again for the same email is a no-op.
    """
    repository = identity.repository_for(User)
    user = repository.find_by_email(email)

    if user is None:
        user = repository.add(User.register(email=email, name=name, role=Role.ADMIN))
        logger.info("admin_created", user_id=user.id, email=user.email)
    elif not user.is_admin:
        user.role = Role.ADMIN.value
        repository.save(user)
        logger.info("admin_promoted", user_id=user.id, email=user.email)

    return user
