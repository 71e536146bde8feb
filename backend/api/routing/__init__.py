"""
Typed routing on top of Flask blueprints.
"""

from .chain import Chain, ChainCompositionError, invoke
from .router import TypedRouter

__all__ = ['TypedRouter', 'Chain', 'ChainCompositionError', 'invoke']
