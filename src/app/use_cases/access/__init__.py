from .get_effective_role_use_case import GetEffectiveRoleUseCase
from .dtos import EffectiveRoleResponse

__all__ = ["GetEffectiveRoleUseCase", "EffectiveRoleResponse"]
