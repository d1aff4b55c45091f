"""Async persistence helpers, one module per aggregate."""
