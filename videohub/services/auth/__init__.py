from .identity import IdentityResolver, TenantExtractor, JWTIdentityResolver, HeaderTenantExtractor

__all__ = ["IdentityResolver", "TenantExtractor", "JWTIdentityResolver", "HeaderTenantExtractor"]
