from cashbook.authorization.policy import AccessDeniedError, AccessPolicy, Capability

__all__ = ["AccessDeniedError", "AccessPolicy", "Capability"]
