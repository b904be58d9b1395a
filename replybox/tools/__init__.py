"""
Command-line tools: activation and settings administration.
"""
