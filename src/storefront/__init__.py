"""Storefront accounts API.

REST backend for storefront user accounts: registration with e-mail
activation, sessions, profile, avatar, address book and administration.
"""

__version__ = "0.1.0"
