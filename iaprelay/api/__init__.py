"""Inbound HTTP surface."""

from iaprelay.api.app import create_app

__all__ = ["create_app"]
