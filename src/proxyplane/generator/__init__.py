"""Proxy class generation."""

from proxyplane.generator.builder import ArtifactBuilder, DispatchContract, ScopeLocalizerBuilder

__all__ = ["ArtifactBuilder", "DispatchContract", "ScopeLocalizerBuilder"]
