"""
Exceptions handled at the web layer
"""


class NotAuthenticated(Exception):
    """No signed-in user on a protected page"""
