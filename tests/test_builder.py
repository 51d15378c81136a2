import unittest
from decimal import Decimal

import yaml

from simctl.common.errors import QuantityError
from simctl.generate.builder import (
    DEFAULT_SCHEDULER_NAME,
    NODE_READY_CONDITION,
    QUEUE_ANNOTATION_KEY,
    NodeFixture,
    PodFixture,
    build_fake_node,
    build_fake_pod,
    gen_node_resources,
)
from simctl.generate.generator import serialize
from simctl.generate.quantity import Quantity, build_resources


class QuantityTests(unittest.TestCase):
    def test_parses_binary_and_decimal_suffixes(self) -> None:
        self.assertEqual(Quantity.parse("4Gi").value, Decimal(4 * 1024**3))
        self.assertEqual(Quantity.parse("500m").value, Decimal("0.5"))
        self.assertEqual(Quantity.parse("24").value, Decimal(24))

    def test_equal_values_compare_equal(self) -> None:
        self.assertEqual(Quantity.parse("1Gi"), Quantity.parse("1024Mi"))
        self.assertNotEqual(Quantity.parse("1Gi"), Quantity.parse("1G"))

    def test_malformed_quantity_raises(self) -> None:
        for raw in ("abc", "", "4Gx", "1.2.3"):
            with self.subTest(raw=raw):
                with self.assertRaises(QuantityError):
                    Quantity.parse(raw, "memory")

    def test_build_resources_keeps_every_key(self) -> None:
        resources = build_resources({"cpu": "2", "memory": "4Gi", "nvidia.com/gpu": "1"})
        self.assertEqual(set(resources), {"cpu", "memory", "nvidia.com/gpu"})
        self.assertEqual(str(resources["memory"]), "4Gi")

    def test_build_resources_fails_on_one_bad_value(self) -> None:
        with self.assertRaises(QuantityError) as ctx:
            build_resources({"cpu": "2", "memory": "lots"})
        self.assertEqual(ctx.exception.resource, "memory")


class BuildFakePodTests(unittest.TestCase):
    def _pod(self, scheduler_name: str = "volcano", queue_name: str = "q1") -> PodFixture:
        return build_fake_pod(
            "test-pod-0123456789abcdef",
            "ns-a",
            scheduler_name,
            queue_name,
            {"app": "demo"},
            "Pending",
            build_resources({"cpu": "2", "memory": "4Gi"}),
        )

    def test_manifest_shape(self) -> None:
        manifest = self._pod().to_manifest()
        self.assertEqual(manifest["kind"], "Pod")
        self.assertEqual(manifest["apiVersion"], "v1")
        self.assertEqual(manifest["metadata"]["namespace"], "ns-a")
        self.assertEqual(manifest["metadata"]["annotations"], {QUEUE_ANNOTATION_KEY: "q1"})
        self.assertEqual(manifest["spec"]["schedulerName"], "volcano")
        self.assertEqual(manifest["spec"]["terminationGracePeriodSeconds"], 0)
        self.assertEqual(manifest["status"], {"phase": "Pending"})
        container = manifest["spec"]["containers"][0]
        self.assertEqual(container["name"], "test-pod-0123456789abcdef")
        self.assertEqual(container["image"], "nginx:latest")
        self.assertEqual(container["resources"], {"requests": {"cpu": "2", "memory": "4Gi"}})

    def test_empty_scheduler_and_queue_get_defaults(self) -> None:
        pod = self._pod(scheduler_name="", queue_name="")
        self.assertEqual(pod.scheduler_name, DEFAULT_SCHEDULER_NAME)
        self.assertEqual(pod.annotations, {QUEUE_ANNOTATION_KEY: "default"})

    def test_missing_labels_become_empty_map(self) -> None:
        pod = build_fake_pod("p", "default", "", "", None, "Pending", {})
        self.assertEqual(pod.to_manifest()["metadata"]["labels"], {})

    def test_round_trip_through_yaml(self) -> None:
        pod = self._pod()
        loaded = yaml.safe_load(serialize(pod))
        self.assertEqual(PodFixture.from_manifest(loaded), pod)


class BuildFakeNodeTests(unittest.TestCase):
    def _node(self) -> NodeFixture:
        capacity, allocatable = gen_node_resources(
            build_resources({"cpu": "24", "memory": "128Gi", "pods": "110"})
        )
        return build_fake_node(
            "instance-0001",
            False,
            capacity,
            allocatable,
            [NODE_READY_CONDITION],
            {"kubernetes.io/hostname": "instance-0001", "node-role.kubernetes.io/node": ""},
        )

    def test_capacity_equals_allocatable(self) -> None:
        node = self._node()
        self.assertEqual(node.capacity, node.allocatable)
        self.assertIsNot(node.capacity, node.allocatable)

    def test_manifest_shape(self) -> None:
        manifest = self._node().to_manifest()
        self.assertEqual(manifest["kind"], "Node")
        self.assertEqual(manifest["metadata"]["annotations"], {})
        self.assertFalse(manifest["spec"]["unschedulable"])
        self.assertEqual(manifest["status"]["capacity"], {"cpu": "24", "memory": "128Gi", "pods": "110"})
        self.assertEqual(
            manifest["status"]["conditions"],
            [
                {
                    "message": "kubelet is posting ready status",
                    "reason": "KubeletReady",
                    "status": "True",
                    "type": "Ready",
                }
            ],
        )

    def test_round_trip_through_yaml(self) -> None:
        node = self._node()
        loaded = yaml.safe_load(serialize(node))
        self.assertEqual(loaded["metadata"]["labels"]["node-role.kubernetes.io/node"], "")
        self.assertEqual(NodeFixture.from_manifest(loaded), node)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
