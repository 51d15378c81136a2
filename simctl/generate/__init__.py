"""Fake node and pod fixtures for scheduler load tests."""

from .builder import NodeFixture, PodFixture, build_fake_node, build_fake_pod
from .generator import GenerationResult, NodeGenerator, PodGenerator
from .pools import AttributePool, NodePoolConfig, PodPoolConfig

__all__ = [
    "AttributePool",
    "GenerationResult",
    "NodeFixture",
    "NodeGenerator",
    "NodePoolConfig",
    "PodFixture",
    "PodGenerator",
    "PodPoolConfig",
    "build_fake_node",
    "build_fake_pod",
]
