"""
AWS boundary modules.

Exports: classify_aws_error, is_transient
"""

from .errors import classify_aws_error, is_transient

__all__ = ["classify_aws_error", "is_transient"]
