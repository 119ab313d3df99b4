from .admin_tokens import ADMIN_SCOPE, issue_admin_token

__all__ = ["ADMIN_SCOPE", "issue_admin_token"]
