"""Resolve package for Pokemon card validation."""

from .poketcg import PokemonTCGResolver

__all__ = ["PokemonTCGResolver"]
