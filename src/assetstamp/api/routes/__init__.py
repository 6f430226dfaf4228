"""
API routes for assetstamp.
"""

from assetstamp.api.routes import tags

__all__ = ["tags"]
