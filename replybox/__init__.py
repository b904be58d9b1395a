"""
ReplyBox sync service — hosted comment widget integration.

Serves the token-authenticated comment synchronization API that lets the
hosted ReplyBox service pull comments from, and push comments into, the
site's comment store. Modular layout: config, logging, database, auth and
API server are separate packages.
"""

__version__ = "0.1.0"
