"""
Get Setup Status Use Case
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.deployment import get_deployment_mode
from src.app.services.setup_flag import SetupFlag

from .complete_setup_use_case import missing_requirements
from .dtos import SetupStatusResponse


class GetSetupStatusUseCase:
    """Reads the completion flag; never touches the database"""

    def __init__(self, setup_flag: Optional[SetupFlag] = None):
        self.setup_flag = setup_flag or SetupFlag()

    async def execute(self) -> Result[SetupStatusResponse]:
        details = self.setup_flag.details()
        return Return.ok(
            SetupStatusResponse(
                setup_complete=self.setup_flag.is_set(),
                completed_at=details.get("timestamp") if details else None,
                mode=get_deployment_mode().value,
                missing_requirements=missing_requirements(),
            )
        )
