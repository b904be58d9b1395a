"""
Secure token issuance and request authentication.
"""

from replybox.auth.token_authority import TokenAuthority, generate_token

__all__ = ["TokenAuthority", "generate_token"]
