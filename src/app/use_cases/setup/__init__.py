"""
Setup Use Cases

First-run bootstrap of a deployment.
"""

from .complete_setup_use_case import CompleteSetupUseCase, missing_requirements
from .get_setup_status_use_case import GetSetupStatusUseCase
from .dtos import SetupCommand, SetupResult, SetupStatusResponse

__all__ = [
    "CompleteSetupUseCase",
    "GetSetupStatusUseCase",
    "missing_requirements",
    "SetupCommand",
    "SetupResult",
    "SetupStatusResponse",
]
