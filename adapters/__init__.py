"""
Adapters package - External service connections.
"""

from adapters import llm_adapter

__all__ = ["llm_adapter"]
