from .tenant_membership import TenantMembership

__all__ = ["TenantMembership"]
