"""Create-if-absent reconciliation of manifests against a cluster."""

from .kubectl import ClusterClient, KubectlClient, ResourceInfo, load_resource_infos
from .reconciler import ChangeCauseRecorder, ReconcileSummary, Reconciler

__all__ = [
    "ChangeCauseRecorder",
    "ClusterClient",
    "KubectlClient",
    "ReconcileSummary",
    "Reconciler",
    "ResourceInfo",
    "load_resource_infos",
]
