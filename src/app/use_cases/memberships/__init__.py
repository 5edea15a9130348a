"""
Membership Use Cases

Role changes and removals at teamspace and channel scope.
"""

from .change_member_role_use_case import ChangeMemberRoleUseCase
from .remove_member_use_case import RemoveMemberUseCase
from .dtos import ChangeMemberRoleCommand, MembershipResponse

__all__ = [
    "ChangeMemberRoleUseCase",
    "RemoveMemberUseCase",
    "ChangeMemberRoleCommand",
    "MembershipResponse",
]
