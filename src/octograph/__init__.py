"""
Octograph
GraphQL gateway mirroring a subset of the GitHub API
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
