from __future__ import annotations

import shlex
import sys
from pathlib import Path
from typing import List, Optional

import typer

from simctl.common.cli import fail
from simctl.common.errors import SimctlError

from .kubectl import KubectlClient, load_resource_infos
from .reconciler import ChangeCauseRecorder, Reconciler


def apply(
    filenames: List[Path] = typer.Option(
        ...,
        "--filename",
        "-f",
        help="The files or directories that contain the configurations to apply.",
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-R",
        help="Process the directories used in -f recursively.",
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace for objects that do not set one (default: the kubeconfig context namespace); objects naming another namespace are rejected.",
    ),
    kubeconfig: Optional[str] = typer.Option(
        None,
        "--kubeconfig",
        help="Path to the kubeconfig file to use for CLI requests.",
    ),
    context: Optional[str] = typer.Option(
        None,
        "--context",
        help="The name of the kubeconfig context to use.",
    ),
    server: Optional[str] = typer.Option(
        None,
        "--server",
        "-s",
        help="The address and port of the Kubernetes API server.",
    ),
    request_timeout: str = typer.Option(
        "0",
        "--request-timeout",
        help="How long to wait for a single server request; 0 means no timeout.",
    ),
    kubectl_cmd: str = typer.Option(
        "kubectl",
        "--kubectl",
        help="Kubectl binary used to talk to the cluster.",
    ),
    record: bool = typer.Option(
        False,
        "--record",
        help="Record the current command in the kubernetes.io/change-cause annotation.",
    ),
) -> None:
    """Apply a configuration to a resource by file name (create only)."""

    client = KubectlClient(
        kubectl_cmd,
        kubeconfig=kubeconfig,
        context=context,
        server=server,
        request_timeout=request_timeout,
    )
    recorder = ChangeCauseRecorder(shlex.join(sys.argv)) if record else None
    try:
        infos, load_errors = load_resource_infos(
            filenames,
            recursive=recursive,
            namespace=namespace or client.current_namespace(),
            enforce_namespace=namespace is not None,
        )
        summary = Reconciler(client, recorder=recorder).run(infos, load_errors)
    except SimctlError as exc:
        fail("apply", exc)
    typer.echo(f"{len(summary.created)} object(s) created, {len(summary.unchanged)} unchanged")
