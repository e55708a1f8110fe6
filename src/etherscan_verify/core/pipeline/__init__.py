"""Verification pipeline stages."""

from .workflow import VerifierPipelineMixin

__all__ = ["VerifierPipelineMixin"]
