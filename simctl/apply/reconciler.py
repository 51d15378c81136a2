from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from simctl.common.errors import (
    AggregateError,
    KubectlError,
    NotFoundError,
    ReconcileError,
    add_source_to_error,
)

from .kubectl import ClusterClient, ResourceInfo

logger = logging.getLogger(__name__)

CHANGE_CAUSE_ANNOTATION = "kubernetes.io/change-cause"

Recorder = Callable[[Dict[str, Any]], None]


class ChangeCauseRecorder:
    """Stores the invoking command line in the change-cause annotation."""

    def __init__(self, command: str) -> None:
        self.command = command

    def __call__(self, obj: Dict[str, Any]) -> None:
        metadata = obj.setdefault("metadata", {})
        if not isinstance(metadata, dict):
            raise TypeError("object metadata is not a mapping")
        annotations = metadata.get("annotations") or {}
        if not isinstance(annotations, dict):
            raise TypeError("object annotations are not a mapping")
        annotations[CHANGE_CAUSE_ANNOTATION] = self.command
        metadata["annotations"] = annotations


@dataclass
class ReconcileSummary:
    created: List[ResourceInfo] = field(default_factory=list)
    unchanged: List[ResourceInfo] = field(default_factory=list)


class Reconciler:
    """Create-if-absent for a batch of objects, one at a time.

    Objects that already exist are left untouched. Failures are collected
    per object so one bad object never stops the rest of the batch.
    """

    def __init__(self, client: ClusterClient, recorder: Optional[Recorder] = None) -> None:
        self.client = client
        self.recorder = recorder

    def run(self, infos: Sequence[ResourceInfo], errors: Iterable[BaseException] = ()) -> ReconcileSummary:
        errs: List[BaseException] = list(errors)
        if not infos and not errs:
            raise ReconcileError("no objects passed to apply")
        logger.info("Resolved %d object(s) to apply.", len(infos))

        summary = ReconcileSummary()
        for info in infos:
            try:
                created = self.apply_object(info)
            except (KubectlError, ReconcileError) as exc:
                errs.append(exc)
                continue
            if created:
                summary.created.append(info)
            else:
                summary.unchanged.append(info)

        if len(errs) == 1:
            raise errs[0]
        if len(errs) > 1:
            raise AggregateError(errs)
        return summary

    def apply_object(self, info: ResourceInfo) -> bool:
        """Create ``info`` if the server does not have it; return whether it was created."""

        self._record(info)

        if not info.name and info.generate_name:
            raise ReconcileError(f"from {info.generate_name}: cannot use generate name with apply")

        try:
            self.client.fetch(info)
        except NotFoundError:
            pass
        except KubectlError as exc:
            raise add_source_to_error(
                f"retrieving current configuration of:\n{info}\nfrom server for:", info.source, exc
            ) from exc
        else:
            logger.debug("%s/%s already exists; leaving it unchanged.", info.kind, info.name)
            return False

        try:
            obj = self.client.create(info.namespace, info.obj)
        except KubectlError as exc:
            raise add_source_to_error("creating", info.source, exc) from exc
        info.refresh(obj)
        logger.info("%s/%s created", info.kind.lower(), info.name)
        return True

    def _record(self, info: ResourceInfo) -> None:
        if self.recorder is None:
            return
        try:
            self.recorder(info.obj)
        except Exception as exc:
            logger.debug("error recording current command: %s", exc)


__all__ = [
    "CHANGE_CAUSE_ANNOTATION",
    "ChangeCauseRecorder",
    "ReconcileSummary",
    "Reconciler",
]
