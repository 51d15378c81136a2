from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from simctl.common.args import split_csv
from simctl.common.cli import fail
from simctl.common.errors import SimctlError

from .generator import NodeGenerator, PodGenerator
from .pools import DEFAULT_MAX_PODS, NodePoolConfig, PodPoolConfig
from .quantity import Quantity

app = typer.Typer(help="Generate fake test data.", no_args_is_help=True)


@app.command("node")
def node(
    count: int = typer.Option(1, "--count", "-c", min=0, help="The count of nodes."),
    output: Path = typer.Option(
        Path("testdata-node.yaml"),
        "--output",
        "-o",
        help="The name of node test data file.",
    ),
    resources: Optional[List[str]] = typer.Option(
        None,
        "--resources",
        "-r",
        help='The resources list for nodes, e.g. -r "cpu=24;memory=128Gi" -r "cpu=48;memory=128Gi;nvidia.com/gpu=8".',
    ),
    labels: Optional[List[str]] = typer.Option(
        None,
        "--labels",
        "-l",
        help='The labels for nodes, e.g. --labels "a=b" -l "a=c;d=b".',
    ),
    max_pods: str = typer.Option(
        DEFAULT_MAX_PODS,
        "--max-pods",
        help="The pods capacity advertised by every node.",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for attribute sampling (default: random).",
    ),
) -> None:
    """Generate fake node data for testing."""

    try:
        Quantity.parse(max_pods, "pods")
    except SimctlError as exc:
        raise typer.BadParameter(str(exc), param_hint="--max-pods") from exc

    config = NodePoolConfig.from_args(
        resources=split_csv(resources),
        labels=split_csv(labels),
        max_pods=max_pods,
    )
    try:
        result = NodeGenerator(config, seed=seed).run(count, output)
    except SimctlError as exc:
        fail("generate node", exc)
    typer.echo(f"Wrote {result.written} node(s) to {output.resolve()}")


@app.command("pod")
def pod(
    count: int = typer.Option(1, "--count", "-c", min=0, help="The count of pods."),
    output: Path = typer.Option(
        Path("testdata-pod.yaml"),
        "--output",
        "-o",
        help="The name of pod test data file.",
    ),
    scheduler_name: str = typer.Option(
        "volcano",
        "--schedulerName",
        "-n",
        help="The name of scheduler.",
    ),
    queues: Optional[List[str]] = typer.Option(
        ["default"],
        "--queues",
        "-q",
        help="Queues for pods.",
    ),
    namespaces: Optional[List[str]] = typer.Option(
        ["default"],
        "--namespaces",
        help="Namespaces for pods.",
    ),
    resources: Optional[List[str]] = typer.Option(
        None,
        "--resources",
        "-r",
        help='The resource list for pods, e.g. -r "cpu=2;memory=4Gi" -r "cpu=4;memory=8Gi;nvidia.com/gpu=1".',
    ),
    labels: Optional[List[str]] = typer.Option(
        None,
        "--labels",
        "-l",
        help='Labels for pods, e.g. --labels "a=b" --labels "a=d;c=e".',
    ),
    phases: Optional[List[str]] = typer.Option(
        None,
        "--phases",
        help="Phases for pods (Pending, Running, Succeeded, Failed, Unknown).",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for attribute sampling (default: random).",
    ),
) -> None:
    """Generate fake pod data for testing."""

    try:
        config = PodPoolConfig.from_args(
            namespaces=split_csv(namespaces),
            queues=split_csv(queues),
            phases=split_csv(phases),
            requests=split_csv(resources),
            labels=split_csv(labels),
            scheduler_name=scheduler_name,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--phases") from exc
    try:
        result = PodGenerator(config, seed=seed).run(count, output)
    except SimctlError as exc:
        fail("generate pod", exc)
    typer.echo(f"Wrote {result.written} pod(s) to {output.resolve()}")


if __name__ == "__main__":  # pragma: no cover
    app()
