"""Featureboard — role-based feedback boards with votes, comments and reactions."""

__version__ = "0.1.0"
