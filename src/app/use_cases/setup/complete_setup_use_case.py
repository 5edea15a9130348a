"""
Complete Setup Use Case

First-run bootstrap: creates the first user, the first teamspace and a
default channel, then marks the deployment as set up. Runs successfully
at most once per deployment.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.deployment import get_deployment_mode, implied_teamspace_slug
from src.app.services.passwords import hash_password, validate_password
from src.app.services.session_manager import SessionManager
from src.app.services.setup_flag import SetupFlag, SetupFlagWriteError
from src.app.services.slug import generate_slug
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    Channel,
    ChannelMembership,
    ChannelRole,
    DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG,
    Teamspace,
    TeamspaceMembership,
    TeamspaceRole,
    User,
)

from .dtos import SetupCommand, SetupResult

logger = logging.getLogger(__name__)

SESSION_SECRET_MIN_LENGTH = 32

USERS_ALREADY_EXIST = Error(
    "USERS_ALREADY_EXIST", "Users already exist. Setup cannot be run again."
)


def missing_requirements() -> List[str]:
    """Deployment prerequisites that are not satisfied"""
    missing = []
    if not ApplicationConfig.DB_URI:
        missing.append("DB_URI is not configured")
    if len(ApplicationConfig.SESSION_SECRET or "") < SESSION_SECRET_MIN_LENGTH:
        missing.append(
            f"SESSION_SECRET must be at least {SESSION_SECRET_MIN_LENGTH} characters"
        )
    return missing


class CompleteSetupUseCase:
    """
    Use case for first-run setup.

    Business Rules:
    - Refused once the completion flag exists
    - Refused while deployment requirements are missing
    - Refused when any user exists (the flag may have been lost)
    - User, teamspace, default channel and both owner memberships are
      created in one transaction
    - The flag is written after the commit; a failed write fails setup
      and is reported to the operator
    - Of concurrent first-run requests exactly one succeeds
    """

    def __init__(self, uow: UnitOfWork, setup_flag: Optional[SetupFlag] = None):
        self.uow = uow
        self.setup_flag = setup_flag or SetupFlag()

    async def execute(self, command: SetupCommand) -> Result[SetupResult]:
        """
        Execute complete setup use case.

        Args:
            command: SetupCommand with owner credentials and names

        Returns:
            Result with SetupResult (including session cookie), or Error
        """
        # Precondition checks that need no database
        if self.setup_flag.is_set():
            return Return.err(
                Error("SETUP_ALREADY_COMPLETED", "Setup has already been completed")
            )

        missing = missing_requirements()
        if missing:
            logger.warning(f"Setup requirements not met: {missing}")
            return Return.err(Error("SETUP_REQUIREMENTS_NOT_MET", "; ".join(missing)))

        violations = validate_password(command.password)
        if violations:
            return Return.err(Error("INVALID_PASSWORD", violations[0]))

        email = command.email.strip().lower()

        if implied_teamspace_slug() is not None:
            teamspace_slug = implied_teamspace_slug()
        else:
            teamspace_slug = generate_slug(
                command.teamspace_name, fallback=DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG
            )
        channel_slug = generate_slug(command.channel_name)

        async with self.uow:
            if await self.uow.users.count() > 0:
                return Return.err(USERS_ALREADY_EXIST)

            try:
                user = await self.uow.users.create(
                    User(
                        email=email,
                        password_hash=hash_password(command.password),
                        name=command.name,
                    )
                )

                # Another first-run request may have inserted concurrently
                if await self.uow.users.count() != 1:
                    await self.uow.rollback()
                    return Return.err(USERS_ALREADY_EXIST)

                teamspace = await self.uow.teamspaces.create(
                    Teamspace(name=command.teamspace_name, slug=teamspace_slug)
                )
                await self.uow.teamspace_memberships.create(
                    TeamspaceMembership(
                        user_id=user.id, teamspace_id=teamspace.id, role=TeamspaceRole.owner
                    )
                )

                channel = await self.uow.channels.create(
                    Channel(
                        teamspace_id=teamspace.id,
                        name=command.channel_name,
                        slug=channel_slug,
                    )
                )
                await self.uow.channel_memberships.create(
                    ChannelMembership(
                        user_id=user.id, channel_id=channel.id, role=ChannelRole.owner
                    )
                )

                issued = await SessionManager(self.uow).issue(user.id)

                audit = AuditEvent(
                    teamspace_id=teamspace.id,
                    user_id=user.id,
                    action="setup.completed",
                    event_metadata={
                        "email": email,
                        "mode": get_deployment_mode().value,
                        "teamspace_slug": teamspace.slug,
                        "channel_slug": channel.slug,
                    },
                )
                await self.uow.audit_events.create(audit)

                await self.uow.commit()
            except (IntegrityError, OperationalError) as exc:
                # Lost the race against a concurrent first-run request
                await self.uow.rollback()
                logger.warning(f"Setup transaction rolled back: {exc}")
                return Return.err(USERS_ALREADY_EXIST)

        try:
            self.setup_flag.mark_complete()
        except SetupFlagWriteError as exc:
            return Return.err(
                Error(
                    "SETUP_FLAG_WRITE_FAILED",
                    f"Setup data was saved but the completion flag could not be "
                    f"written to {self.setup_flag.path}: {exc}. Fix the data "
                    f"directory permissions; setup stays locked while users exist.",
                )
            )

        logger.info(f"Setup completed: owner {user.id}, teamspace {teamspace.slug}")

        return Return.ok(
            SetupResult(
                user_id=str(user.id),
                email=user.email,
                teamspace_slug=teamspace.slug,
                channel_slug=channel.slug,
                session_token=issued.token,
                session_cookie=issued.cookie,
            )
        )
