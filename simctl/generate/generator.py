from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from simctl.common.errors import FixtureError, QuantityError

from .builder import (
    HOSTNAME_LABEL_KEY,
    NODE_READY_CONDITION,
    NodeFixture,
    PodFixture,
    build_fake_node,
    build_fake_pod,
    gen_node_resources,
)
from .pools import NodePoolConfig, PodPoolConfig
from .quantity import build_resources
from .writer import write_documents

logger = logging.getLogger(__name__)

UUID_MAX_LEN = 32
POD_NAME_PREFIX = "test-pod"
POD_NAME_ID_LEN = 16


def generate_id_with_length(prefix: str, length: int, rng: Optional[random.Random] = None) -> str:
    """``<prefix>-<hex>`` where the random part is at most 32 characters."""

    length = max(0, min(length, UUID_MAX_LEN))
    if rng is None:
        value = uuid.uuid4()
    else:
        value = uuid.UUID(int=rng.getrandbits(128), version=4)
    return f"{prefix.lower()}-{value.hex[:length]}"


def serialize(fixture: Any) -> str:
    return yaml.safe_dump(fixture.to_manifest(), sort_keys=False, default_flow_style=False)


@dataclass
class GenerationResult:
    kind: str
    requested: int
    documents: List[str] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def written(self) -> int:
        return len(self.documents)


class FixtureGenerator:
    kind = "fixture"

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def indices(self, count: int) -> range:
        return range(count)

    def build(self, index: int) -> Any:
        raise NotImplementedError

    def describe(self) -> List[str]:
        return []

    def render(self, count: int) -> GenerationResult:
        """Build and serialize ``count`` fixtures, stopping at the first failure."""

        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        result = GenerationResult(kind=self.kind, requested=count)
        for index in self.indices(count):
            try:
                document = serialize(self.build(index))
            except (QuantityError, yaml.YAMLError) as exc:
                logger.error("Failed to build %s #%d: %s", self.kind, index, exc)
                result.error = exc
                break
            result.documents.append(document)
        return result

    def run(self, count: int, output: Path) -> GenerationResult:
        logger.info("Generate test data of %d %s(s) with following config:", count, self.kind)
        for line in self.describe():
            logger.info("%s", line)
        result = self.render(count)
        write_documents(result.documents, output)
        if result.error is not None:
            raise FixtureError(
                f"generated {result.written} of {count} {self.kind}(s) before failing: {result.error}; "
                f"partial output written to {output}",
                result.written,
            ) from result.error
        return result


class NodeGenerator(FixtureGenerator):
    kind = "node"

    def __init__(
        self,
        config: NodePoolConfig,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__(rng=rng, seed=seed)
        self.config = config

    def indices(self, count: int) -> range:
        return range(1, count + 1)

    def describe(self) -> List[str]:
        return [
            f"Node capacity resources list: {list(self.config.resources.values)}",
            f"Node labels list: {list(self.config.labels.values)}",
        ]

    def build(self, index: int) -> NodeFixture:
        name = f"instance-{index:04d}"
        labels = dict(self.config.labels.sample(self.rng))
        labels[HOSTNAME_LABEL_KEY] = name
        resources = dict(self.config.resources.sample(self.rng))
        resources["pods"] = self.config.max_pods
        capacity, allocatable = gen_node_resources(build_resources(resources))
        return build_fake_node(name, False, capacity, allocatable, [NODE_READY_CONDITION], labels)


class PodGenerator(FixtureGenerator):
    kind = "pod"

    def __init__(
        self,
        config: PodPoolConfig,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__(rng=rng, seed=seed)
        self.config = config

    def describe(self) -> List[str]:
        return [
            f"Pod namespace list: {list(self.config.namespaces.values)}",
            f"Pod queue list: {list(self.config.queues.values)}",
            f"Pod phase list: {list(self.config.phases.values)}",
            f"Pod request resources list: {list(self.config.requests.values)}",
            f"Pod labels list: {list(self.config.labels.values)}",
        ]

    def build(self, index: int) -> PodFixture:
        config = self.config
        name = generate_id_with_length(POD_NAME_PREFIX, POD_NAME_ID_LEN, self.rng)
        namespace = config.namespaces.sample(self.rng)
        requests = config.requests.sample(self.rng)
        queue_name = config.queues.sample(self.rng)
        labels = config.labels.sample(self.rng)
        phase = config.phases.sample(self.rng)
        return build_fake_pod(
            name,
            namespace,
            config.scheduler_name,
            queue_name,
            labels,
            phase,
            build_resources(requests),
        )


__all__ = [
    "FixtureGenerator",
    "GenerationResult",
    "NodeGenerator",
    "PodGenerator",
    "generate_id_with_length",
    "serialize",
]
