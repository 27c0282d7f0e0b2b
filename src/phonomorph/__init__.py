"""Phonomorph: custodial token wallets addressed by phone number."""

__version__ = "0.1.0"
