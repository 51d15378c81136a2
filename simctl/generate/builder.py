from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .quantity import Quantity, ResourceList, render_resources

DEFAULT_QUEUE = "default"
DEFAULT_SCHEDULER_NAME = "default-scheduler"
QUEUE_ANNOTATION_KEY = "volcano.sh/queue-name"
HOSTNAME_LABEL_KEY = "kubernetes.io/hostname"
FAKE_POD_IMAGE = "nginx:latest"
GRACE_PERIOD_SECONDS = 0


@dataclass(frozen=True)
class NodeCondition:
    type: str
    status: str
    reason: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "message": self.message,
            "reason": self.reason,
            "status": self.status,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NodeCondition":
        return cls(
            type=str(data.get("type", "")),
            status=str(data.get("status", "")),
            reason=str(data.get("reason", "")),
            message=str(data.get("message", "")),
        )


NODE_READY_CONDITION = NodeCondition(
    type="Ready",
    status="True",
    reason="KubeletReady",
    message="kubelet is posting ready status",
)


def _parse_resource_map(data: Optional[Mapping[str, Any]]) -> ResourceList:
    return {str(name): Quantity.parse(str(value), str(name)) for name, value in (data or {}).items()}


@dataclass
class NodeFixture:
    name: str
    unschedulable: bool
    capacity: ResourceList
    allocatable: ResourceList
    conditions: List[NodeCondition]
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)

    def to_manifest(self) -> Dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "Node",
            "metadata": {
                "name": self.name,
                "labels": dict(self.labels or {}),
                "annotations": dict(self.annotations or {}),
            },
            "spec": {"unschedulable": self.unschedulable},
            "status": {
                "capacity": render_resources(self.capacity),
                "allocatable": render_resources(self.allocatable),
                "conditions": [condition.to_dict() for condition in self.conditions],
            },
        }

    @classmethod
    def from_manifest(cls, doc: Mapping[str, Any]) -> "NodeFixture":
        metadata = doc.get("metadata") or {}
        spec = doc.get("spec") or {}
        status = doc.get("status") or {}
        return cls(
            name=metadata.get("name", ""),
            unschedulable=bool(spec.get("unschedulable", False)),
            capacity=_parse_resource_map(status.get("capacity")),
            allocatable=_parse_resource_map(status.get("allocatable")),
            conditions=[NodeCondition.from_dict(item) for item in status.get("conditions") or []],
            labels=dict(metadata.get("labels") or {}),
            annotations=dict(metadata.get("annotations") or {}),
        )


@dataclass
class PodFixture:
    name: str
    namespace: str
    scheduler_name: str
    queue_name: str
    phase: str
    requests: ResourceList
    labels: Dict[str, str] = field(default_factory=dict)
    image: str = FAKE_POD_IMAGE
    termination_grace_period_seconds: int = GRACE_PERIOD_SECONDS

    @property
    def annotations(self) -> Dict[str, str]:
        return {QUEUE_ANNOTATION_KEY: self.queue_name}

    def to_manifest(self) -> Dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "Pod",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels or {}),
                "annotations": self.annotations,
            },
            "spec": {
                "schedulerName": self.scheduler_name,
                "terminationGracePeriodSeconds": self.termination_grace_period_seconds,
                "containers": [
                    {
                        "name": self.name,
                        "image": self.image,
                        "resources": {"requests": render_resources(self.requests)},
                    }
                ],
            },
            "status": {"phase": self.phase},
        }

    @classmethod
    def from_manifest(cls, doc: Mapping[str, Any]) -> "PodFixture":
        metadata = doc.get("metadata") or {}
        spec = doc.get("spec") or {}
        containers = spec.get("containers") or [{}]
        container = containers[0]
        resources = container.get("resources") or {}
        annotations = metadata.get("annotations") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            scheduler_name=spec.get("schedulerName", ""),
            queue_name=annotations.get(QUEUE_ANNOTATION_KEY, ""),
            phase=(doc.get("status") or {}).get("phase", ""),
            requests=_parse_resource_map(resources.get("requests")),
            labels=dict(metadata.get("labels") or {}),
            image=container.get("image", FAKE_POD_IMAGE),
            termination_grace_period_seconds=int(spec.get("terminationGracePeriodSeconds", GRACE_PERIOD_SECONDS)),
        )


def gen_node_resources(resources: ResourceList) -> Tuple[ResourceList, ResourceList]:
    """Split sampled resources into (capacity, allocatable)."""

    # TODO: subtract kube/system reserved resources from allocatable
    return dict(resources), dict(resources)


def build_fake_node(
    name: str,
    unschedulable: bool,
    capacity: ResourceList,
    allocatable: ResourceList,
    conditions: List[NodeCondition],
    labels: Optional[Mapping[str, str]],
) -> NodeFixture:
    return NodeFixture(
        name=name,
        unschedulable=unschedulable,
        capacity=dict(capacity),
        allocatable=dict(allocatable),
        conditions=list(conditions),
        labels=dict(labels or {}),
        annotations={},
    )


def build_fake_pod(
    name: str,
    namespace: str,
    scheduler_name: str,
    queue_name: str,
    labels: Optional[Mapping[str, str]],
    phase: str,
    requests: ResourceList,
) -> PodFixture:
    return PodFixture(
        name=name,
        namespace=namespace,
        scheduler_name=scheduler_name or DEFAULT_SCHEDULER_NAME,
        queue_name=queue_name or DEFAULT_QUEUE,
        phase=phase,
        requests=dict(requests),
        labels=dict(labels or {}),
    )


__all__ = [
    "DEFAULT_QUEUE",
    "DEFAULT_SCHEDULER_NAME",
    "HOSTNAME_LABEL_KEY",
    "NODE_READY_CONDITION",
    "NodeCondition",
    "NodeFixture",
    "PodFixture",
    "QUEUE_ANNOTATION_KEY",
    "build_fake_node",
    "build_fake_pod",
    "gen_node_resources",
]
