"""
Post formatting and publishing.
"""

from .formatter import format_post
from .publisher import PublishError, PublishResult, XPublisher

__all__ = ["format_post", "XPublisher", "PublishError", "PublishResult"]
