from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

import yaml

from simctl.common.errors import KubectlError, NotFoundError, SimctlError

logger = logging.getLogger(__name__)

MANIFEST_SUFFIXES = (".yaml", ".yml", ".json")
DEFAULT_NAMESPACE = "default"
CLUSTER_SCOPED_KINDS = frozenset(
    {
        "APIService",
        "ClusterRole",
        "ClusterRoleBinding",
        "CustomResourceDefinition",
        "IngressClass",
        "MutatingWebhookConfiguration",
        "Namespace",
        "Node",
        "PersistentVolume",
        "PriorityClass",
        "RuntimeClass",
        "StorageClass",
        "ValidatingWebhookConfiguration",
        "VolumeAttachment",
    }
)


@dataclass
class ResourceInfo:
    """One object read from a manifest, bound to the file it came from."""

    source: str
    obj: Dict[str, Any]

    @property
    def metadata(self) -> Dict[str, Any]:
        metadata = self.obj.get("metadata")
        return metadata if isinstance(metadata, dict) else {}

    @property
    def kind(self) -> str:
        return str(self.obj.get("kind") or "")

    @property
    def api_version(self) -> str:
        return str(self.obj.get("apiVersion") or "")

    @property
    def name(self) -> str:
        return str(self.metadata.get("name") or "")

    @property
    def namespace(self) -> str:
        return str(self.metadata.get("namespace") or "")

    @property
    def generate_name(self) -> str:
        return str(self.metadata.get("generateName") or "")

    @property
    def namespaced(self) -> bool:
        return self.kind not in CLUSTER_SCOPED_KINDS

    def refresh(self, obj: Dict[str, Any]) -> None:
        self.obj = obj

    def __str__(self) -> str:
        return (
            f'Resource: "{self.api_version}, Kind={self.kind}", '
            f'Name: "{self.name}", Namespace: "{self.namespace}"'
        )


class ClusterClient(Protocol):
    def fetch(self, info: ResourceInfo) -> Dict[str, Any]:
        """Return the live object or raise ``NotFoundError``/``KubectlError``."""

    def create(self, namespace: str, obj: Dict[str, Any]) -> Dict[str, Any]:
        """Create ``obj`` and return the object as stored by the server."""


class KubectlClient:
    def __init__(
        self,
        kubectl_cmd: str = "kubectl",
        *,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        server: Optional[str] = None,
        request_timeout: str = "0",
    ) -> None:
        self.kubectl_cmd = kubectl_cmd
        self.kubeconfig = kubeconfig
        self.context = context
        self.server = server
        self.request_timeout = request_timeout

    def base_command(self) -> List[str]:
        cmd = [self.kubectl_cmd]
        if self.kubeconfig:
            cmd += ["--kubeconfig", self.kubeconfig]
        if self.context:
            cmd += ["--context", self.context]
        if self.server:
            cmd += ["--server", self.server]
        if self.request_timeout:
            cmd += ["--request-timeout", self.request_timeout]
        return cmd

    def run(self, args: Sequence[str], *, input_data: Optional[str] = None) -> subprocess.CompletedProcess:
        cmd = self.base_command() + list(args)
        logger.debug("Running %s", " ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                input=input_data.encode("utf-8") if input_data is not None else None,
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise KubectlError(f"kubectl executable not found: {self.kubectl_cmd}") from exc

    def fetch(self, info: ResourceInfo) -> Dict[str, Any]:
        proc = self.run(["get", "-f", "-", "-o", "json"], input_data=yaml.safe_dump(info.obj, sort_keys=False))
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="ignore").strip()
            if "NotFound" in stderr:
                raise NotFoundError(stderr)
            raise KubectlError(stderr or f"kubectl get exited with status {proc.returncode}")
        return self._decode(proc.stdout)

    def create(self, namespace: str, obj: Dict[str, Any]) -> Dict[str, Any]:
        args = ["create", "-f", "-", "-o", "json"]
        if namespace:
            args += ["--namespace", namespace]
        proc = self.run(args, input_data=yaml.safe_dump(obj, sort_keys=False))
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="ignore").strip()
            raise KubectlError(stderr or f"kubectl create exited with status {proc.returncode}")
        return self._decode(proc.stdout)

    def current_namespace(self) -> str:
        """Namespace of the selected kubeconfig context, ``default`` when unset."""

        proc = self.run(["config", "view", "--minify", "-o", "jsonpath={..namespace}"])
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="ignore").strip()
            logger.debug("Could not read the context namespace, using %s: %s", DEFAULT_NAMESPACE, stderr)
            return DEFAULT_NAMESPACE
        return proc.stdout.decode("utf-8", errors="ignore").strip() or DEFAULT_NAMESPACE

    @staticmethod
    def _decode(stdout: bytes) -> Dict[str, Any]:
        try:
            data = json.loads(stdout.decode("utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise KubectlError(f"unexpected kubectl output: {exc}") from exc
        if not isinstance(data, dict):
            raise KubectlError("unexpected kubectl output: not an object")
        return data


def collect_manifest_files(paths: Iterable[Path], recursive: bool = False) -> Tuple[List[Path], List[SimctlError]]:
    files: List[Path] = []
    errors: List[SimctlError] = []
    seen = set()
    for path in paths:
        resolved = Path(path).expanduser()
        if resolved.is_dir():
            pattern = "**/*" if recursive else "*"
            candidates = sorted(
                item for item in resolved.glob(pattern) if item.is_file() and item.suffix in MANIFEST_SUFFIXES
            )
        elif resolved.exists():
            candidates = [resolved]
        else:
            errors.append(SimctlError(f'the path "{path}" does not exist'))
            continue
        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            files.append(candidate)
    return files, errors


def _flatten(doc: Dict[str, Any]) -> List[Any]:
    if str(doc.get("kind") or "").endswith("List") and isinstance(doc.get("items"), list):
        flattened: List[Any] = []
        for item in doc["items"]:
            flattened.extend(_flatten(item) if isinstance(item, dict) else [item])
        return flattened
    return [doc]


def load_resource_infos(
    paths: Iterable[Path],
    *,
    recursive: bool = False,
    namespace: Optional[str] = None,
    enforce_namespace: bool = False,
) -> Tuple[List[ResourceInfo], List[SimctlError]]:
    """Read every manifest under ``paths``, continuing past broken files.

    Namespaced objects without a namespace get ``namespace`` (or ``default``);
    callers pass the kubeconfig context namespace when none was given.
    With ``enforce_namespace`` an object naming a different namespace is an error.
    """

    files, errors = collect_manifest_files(paths, recursive=recursive)
    effective_namespace = namespace or DEFAULT_NAMESPACE
    infos: List[ResourceInfo] = []
    for manifest in files:
        source = str(manifest)
        try:
            documents = list(yaml.safe_load_all(manifest.read_text(encoding="utf-8")))
        except (OSError, yaml.YAMLError) as exc:
            errors.append(SimctlError(f'error reading "{source}": {exc}'))
            continue
        for doc in documents:
            if doc is None:
                continue
            if not isinstance(doc, dict):
                errors.append(SimctlError(f'error parsing "{source}": document is not a mapping'))
                continue
            for item in _flatten(doc):
                if not isinstance(item, dict) or not item.get("kind") or not item.get("apiVersion"):
                    errors.append(SimctlError(f'error validating "{source}": apiVersion and kind are required'))
                    continue
                info = ResourceInfo(source=source, obj=item)
                if info.namespaced:
                    if enforce_namespace and info.namespace and info.namespace != effective_namespace:
                        errors.append(
                            SimctlError(
                                f'the namespace from the provided object "{info.namespace}" does not match '
                                f'the namespace "{effective_namespace}". You must pass '
                                f"'--namespace={info.namespace}' to perform this operation."
                            )
                        )
                        continue
                    if not info.namespace:
                        metadata = item.setdefault("metadata", {})
                        if isinstance(metadata, dict):
                            metadata["namespace"] = effective_namespace
                infos.append(info)
    return infos, errors


__all__ = [
    "ClusterClient",
    "KubectlClient",
    "ResourceInfo",
    "collect_manifest_files",
    "load_resource_infos",
]
