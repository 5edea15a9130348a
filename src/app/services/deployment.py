"""
Deployment mode helpers.

Single-tenant deployments have exactly one teamspace with a reserved slug,
so routes may omit the teamspace segment.
"""

from typing import Optional

from config import ApplicationConfig
from src.domain.entities import DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG, DeploymentMode


def get_deployment_mode() -> DeploymentMode:
    if ApplicationConfig.MODE == DeploymentMode.multi_tenant.value:
        return DeploymentMode.multi_tenant
    return DeploymentMode.single_tenant


def is_single_tenant() -> bool:
    return get_deployment_mode() == DeploymentMode.single_tenant


def implied_teamspace_slug() -> Optional[str]:
    """Reserved teamspace slug in single-tenant mode, None otherwise"""
    if is_single_tenant():
        return DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG
    return None
