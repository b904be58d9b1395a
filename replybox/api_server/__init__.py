"""
API server package — the REST surface the hosted ReplyBox service talks to.

Authenticates requests with the secure token and delegates to the comment
repository for reads and writes.
"""
