import unittest
from typing import Any, Dict, List, Optional

from simctl.apply.kubectl import ResourceInfo
from simctl.apply.reconciler import CHANGE_CAUSE_ANNOTATION, ChangeCauseRecorder, Reconciler
from simctl.common.errors import (
    AggregateError,
    KubectlError,
    NotFoundError,
    ReconcileError,
    SimctlError,
)


def make_info(name: str, source: str = "pods.yaml", **metadata: Any) -> ResourceInfo:
    meta: Dict[str, Any] = {"namespace": "default"}
    if name:
        meta["name"] = name
    meta.update(metadata)
    return ResourceInfo(source=source, obj={"apiVersion": "v1", "kind": "Pod", "metadata": meta})


class FakeClient:
    def __init__(
        self,
        existing: tuple = (),
        fetch_errors: Optional[Dict[str, Exception]] = None,
        create_errors: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self.existing = set(existing)
        self.fetch_errors = fetch_errors or {}
        self.create_errors = create_errors or {}
        self.fetched: List[str] = []
        self.created: List[str] = []

    def fetch(self, info: ResourceInfo) -> Dict[str, Any]:
        self.fetched.append(info.name)
        if info.name in self.fetch_errors:
            raise self.fetch_errors[info.name]
        if info.name in self.existing:
            return dict(info.obj)
        raise NotFoundError(f'pods "{info.name}" not found')

    def create(self, namespace: str, obj: Dict[str, Any]) -> Dict[str, Any]:
        name = obj["metadata"]["name"]
        if name in self.create_errors:
            raise self.create_errors[name]
        self.created.append(name)
        stored = dict(obj)
        stored["metadata"] = dict(obj["metadata"], uid=f"uid-{name}", namespace=namespace)
        return stored


class ReconcilerTests(unittest.TestCase):
    def test_only_missing_objects_are_created(self) -> None:
        client = FakeClient(existing=("one", "three"))
        infos = [make_info("one"), make_info("two"), make_info("three")]
        summary = Reconciler(client).run(infos)
        self.assertEqual(client.fetched, ["one", "two", "three"])
        self.assertEqual(client.created, ["two"])
        self.assertEqual([info.name for info in summary.created], ["two"])
        self.assertEqual([info.name for info in summary.unchanged], ["one", "three"])
        self.assertEqual(infos[1].metadata["uid"], "uid-two")
        self.assertNotIn("uid", infos[0].metadata)

    def test_fetch_failures_are_aggregated_in_input_order(self) -> None:
        client = FakeClient(
            fetch_errors={
                "a": KubectlError("connection refused"),
                "b": KubectlError("forbidden"),
            }
        )
        with self.assertRaises(AggregateError) as ctx:
            Reconciler(client).run([make_info("a", source="a.yaml"), make_info("b", source="b.yaml")])
        errors = list(ctx.exception)
        self.assertEqual(len(errors), 2)
        self.assertIn('"a.yaml"', str(errors[0]))
        self.assertIn("connection refused", str(errors[0]))
        self.assertIn('"b.yaml"', str(errors[1]))
        self.assertIn("retrieving current configuration of", str(errors[1]))
        self.assertEqual(client.created, [])

    def test_single_error_is_raised_directly(self) -> None:
        client = FakeClient(create_errors={"b": KubectlError("quota exceeded")})
        with self.assertRaises(KubectlError) as ctx:
            Reconciler(client).run([make_info("a"), make_info("b", source="b.yaml")])
        self.assertNotIsInstance(ctx.exception, AggregateError)
        self.assertIn('error when creating "b.yaml"', str(ctx.exception))
        self.assertEqual(client.created, ["a"])

    def test_failure_does_not_stop_later_objects(self) -> None:
        client = FakeClient(fetch_errors={"a": KubectlError("timeout")})
        with self.assertRaises(KubectlError):
            Reconciler(client).run([make_info("a"), make_info("b"), make_info("c")])
        self.assertEqual(client.created, ["b", "c"])

    def test_empty_batch_is_an_error(self) -> None:
        with self.assertRaises(ReconcileError) as ctx:
            Reconciler(FakeClient()).run([])
        self.assertIn("no objects", str(ctx.exception))

    def test_load_errors_are_reported_first(self) -> None:
        client = FakeClient(fetch_errors={"a": KubectlError("timeout")})
        load_error = SimctlError('the path "missing.yaml" does not exist')
        with self.assertRaises(AggregateError) as ctx:
            Reconciler(client).run([make_info("a")], [load_error])
        self.assertIs(ctx.exception.errors[0], load_error)

    def test_load_error_alone_is_raised(self) -> None:
        load_error = SimctlError("bad file")
        with self.assertRaises(SimctlError) as ctx:
            Reconciler(FakeClient()).run([], [load_error])
        self.assertIs(ctx.exception, load_error)

    def test_generate_name_is_rejected(self) -> None:
        client = FakeClient()
        with self.assertRaises(ReconcileError) as ctx:
            Reconciler(client).run([make_info("", generateName="web-")])
        self.assertIn("cannot use generate name with apply", str(ctx.exception))
        self.assertEqual(client.fetched, [])

    def test_recorder_annotates_created_objects(self) -> None:
        client = FakeClient()
        info = make_info("a")
        Reconciler(client, recorder=ChangeCauseRecorder("simctl apply -f pods.yaml")).run([info])
        self.assertEqual(info.metadata["annotations"][CHANGE_CAUSE_ANNOTATION], "simctl apply -f pods.yaml")

    def test_recorder_failure_is_only_logged(self) -> None:
        def broken_recorder(_obj: Dict[str, Any]) -> None:
            raise RuntimeError("recorder offline")

        client = FakeClient()
        with self.assertLogs("simctl.apply.reconciler", level="DEBUG") as logs:
            summary = Reconciler(client, recorder=broken_recorder).run([make_info("a")])
        self.assertEqual(len(summary.created), 1)
        self.assertTrue(any("recorder offline" in line for line in logs.output))


class AggregateErrorTests(unittest.TestCase):
    def test_message_lists_every_error(self) -> None:
        err = AggregateError([SimctlError("first"), SimctlError("second")])
        self.assertEqual(str(err), "[first, second]")
        self.assertEqual(len(err), 2)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
