"""
Language-specific code generators.

Go is the only target; its generator, type system and formatter live in
the ``go`` subpackage.
"""

from .go import GoGenerator, create_go_generator

__all__ = ["GoGenerator", "create_go_generator"]
