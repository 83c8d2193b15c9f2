"""
Readiness predicate for controller deployments.
"""
import logging
from typing import Iterable, List, Protocol

from kcm_e2e.errors import (
    InsufficientReplicas,
    NameMismatch,
    NotReady,
    QueryError,
    Terminating,
)
from kcm_e2e.kube_types import DeploymentSnapshot, Target

logger = logging.getLogger(__name__)


class ClusterStateQuery(Protocol):
    def list_deployments(self, label_selector: str, limit: int) -> List[DeploymentSnapshot]:
        """List deployments matching label_selector, raising QueryError on failure."""
        ...


def probe(target: Target, query: ClusterStateQuery) -> None:
    """
    Check that every controller deployment of a target is ready.

    Args:
        target: Readiness contract to check
        query: Cluster state to read from

    Raises:
        ReadinessError: The first reason the target is not ready yet
    """
    try:
        deployments = query.list_deployments(target.label_selector, limit=target.expected_replicas)
    except QueryError as e:
        raise QueryError(
            target.name,
            f"failed to list {target.name} controller deployments: {e.detail}",
        ) from e

    if len(deployments) < target.expected_replicas:
        raise InsufficientReplicas(
            target.name,
            f"expected at least {target.expected_replicas} controller deployments, "
            f"got {len(deployments)}",
        )

    for deployment in deployments:
        if deployment.terminating:
            raise Terminating(
                target.name,
                f"controller deployment {deployment.name} deletion timestamp should be nil, "
                f"got: {deployment.deletion_timestamp}",
            )
        if target.name_contract not in deployment.name:
            raise NameMismatch(
                target.name,
                f"controller deployment name {deployment.name} does not contain "
                f"'{target.name_contract}'",
            )
        if deployment.ready_replicas < 1:
            raise NotReady(
                target.name,
                f"controller deployment {deployment.name} does not yet have any ready replicas",
            )

    logger.debug(f"{target.name}: {len(deployments)} controller deployment(s) ready")


def verify_controllers_up(targets: Iterable[Target], query: ClusterStateQuery) -> None:
    """Probe every target in order, failing on the first one that is not ready."""
    for target in targets:
        probe(target, query)
