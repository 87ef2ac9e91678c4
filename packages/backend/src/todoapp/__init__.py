"""todoapp — personal to-do lists with optional bearer-token ownership.

A small JSON API for listing, creating, toggling and deleting tasks, plus
email/password registration and login that issue JWT bearer tokens.
Tasks created without a token stay unowned and remain visible to everyone.
"""

__version__ = "0.1.0"
