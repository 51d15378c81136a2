"""Candidate attribute pools sampled once per generated fixture."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Generic, Mapping, Optional, Sequence, Tuple, TypeVar

from simctl.common.args import parse_map_args

logger = logging.getLogger(__name__)

T = TypeVar("T")

POD_PHASES: Tuple[str, ...] = ("Pending", "Running", "Succeeded", "Failed", "Unknown")

DEFAULT_NODE_RESOURCES: Tuple[Dict[str, str], ...] = (
    {"cpu": "24", "memory": "128Gi"},
    {"cpu": "48", "memory": "256Gi", "nvidia.com/gpu": "8"},
)
DEFAULT_NODE_LABELS: Tuple[Dict[str, str], ...] = (
    {
        "kubernetes.io/arch": "amd64",
        "kubernetes.io/os": "linux",
        "node-role.kubernetes.io/node": "",
    },
)
DEFAULT_MAX_PODS = "110"

DEFAULT_POD_NAMESPACES: Tuple[str, ...] = ("default",)
DEFAULT_POD_QUEUES: Tuple[str, ...] = ("default",)
DEFAULT_POD_PHASES: Tuple[str, ...] = ("Pending",)
DEFAULT_POD_REQUESTS: Tuple[Dict[str, str], ...] = (
    {"cpu": "2", "memory": "4Gi"},
    {"cpu": "4", "memory": "8Gi"},
)
DEFAULT_POD_LABELS: Tuple[Dict[str, str], ...] = ({"scheduler-simulator": "true"},)


class AttributePool(Generic[T]):
    """A non-empty, read-only sequence of candidates drawn uniformly with replacement."""

    def __init__(self, name: str, values: Sequence[T]) -> None:
        if not values:
            raise ValueError(f"attribute pool {name!r} must not be empty")
        self.name = name
        self._values: Tuple[T, ...] = tuple(values)

    @classmethod
    def resolve(cls, name: str, overrides: Optional[Sequence[T]], defaults: Sequence[T]) -> "AttributePool[T]":
        if overrides:
            return cls(name, overrides)
        return cls(name, defaults)

    def sample(self, rng: random.Random) -> T:
        return self._values[rng.randrange(len(self._values))]

    @property
    def values(self) -> Tuple[T, ...]:
        return self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"AttributePool({self.name!r}, {list(self._values)!r})"


def _map_pool(name: str, raw: Optional[Sequence[str]], defaults: Sequence[Mapping[str, str]]) -> AttributePool[Mapping[str, str]]:
    parsed = parse_map_args(raw)
    if raw and not parsed:
        logger.warning("No valid key=value pairs in %s overrides %s; using defaults.", name, list(raw))
    return AttributePool.resolve(name, parsed, defaults)


@dataclass
class NodePoolConfig:
    resources: AttributePool[Mapping[str, str]]
    labels: AttributePool[Mapping[str, str]]
    max_pods: str = DEFAULT_MAX_PODS

    @classmethod
    def from_args(
        cls,
        resources: Optional[Sequence[str]] = None,
        labels: Optional[Sequence[str]] = None,
        max_pods: str = DEFAULT_MAX_PODS,
    ) -> "NodePoolConfig":
        return cls(
            resources=_map_pool("node resources", resources, DEFAULT_NODE_RESOURCES),
            labels=_map_pool("node labels", labels, DEFAULT_NODE_LABELS),
            max_pods=max_pods,
        )


@dataclass
class PodPoolConfig:
    namespaces: AttributePool[str]
    queues: AttributePool[str]
    phases: AttributePool[str]
    requests: AttributePool[Mapping[str, str]]
    labels: AttributePool[Mapping[str, str]]
    scheduler_name: str = ""

    @classmethod
    def from_args(
        cls,
        namespaces: Optional[Sequence[str]] = None,
        queues: Optional[Sequence[str]] = None,
        phases: Optional[Sequence[str]] = None,
        requests: Optional[Sequence[str]] = None,
        labels: Optional[Sequence[str]] = None,
        scheduler_name: str = "",
    ) -> "PodPoolConfig":
        unknown = [phase for phase in phases or [] if phase not in POD_PHASES]
        if unknown:
            raise ValueError(f"unknown pod phase(s) {unknown}; expected one of {list(POD_PHASES)}")
        return cls(
            namespaces=AttributePool.resolve("pod namespaces", namespaces, DEFAULT_POD_NAMESPACES),
            queues=AttributePool.resolve("pod queues", queues, DEFAULT_POD_QUEUES),
            phases=AttributePool.resolve("pod phases", phases, DEFAULT_POD_PHASES),
            requests=_map_pool("pod requests", requests, DEFAULT_POD_REQUESTS),
            labels=_map_pool("pod labels", labels, DEFAULT_POD_LABELS),
            scheduler_name=scheduler_name,
        )


__all__ = [
    "AttributePool",
    "NodePoolConfig",
    "POD_PHASES",
    "PodPoolConfig",
]
