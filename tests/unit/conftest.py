import pytest
from unittest.mock import AsyncMock, MagicMock

REPOSITORY_METHODS = {
    "users": ["get_by_email", "get_by_id", "count", "create", "update"],
    "teamspaces": ["get_by_id", "get_by_slug", "create"],
    "channels": ["get_by_id", "get_by_slug", "create"],
    "teamspace_memberships": [
        "get_by_user_and_teamspace",
        "get_by_user_id",
        "count_by_role",
        "create",
        "update",
        "delete",
    ],
    "channel_memberships": [
        "get_by_user_and_channel",
        "count_by_role",
        "delete_by_user_and_teamspace",
        "create",
        "update",
        "delete",
    ],
    "sessions": ["get_by_id", "create", "update", "delete_by_id", "delete_all_except"],
    "invitations": [
        "get_by_id",
        "get_by_token",
        "get_pending_for_email",
        "get_pending_by_teamspace_id",
        "create",
        "update",
        "increment_attempts",
        "mark_accepted_if_pending",
    ],
    "audit_events": ["create"],
}


def _echo(entity):
    return entity


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories; create/update return their argument"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    for name, methods in REPOSITORY_METHODS.items():
        repository = MagicMock()
        for method in methods:
            mock = AsyncMock()
            if method in ("create", "update"):
                mock.side_effect = _echo
            setattr(repository, method, mock)
        setattr(uow, name, repository)

    return uow
