"""
Type definitions for Kubernetes objects.
"""
from dataclasses import dataclass
from typing import Optional
from datetime import datetime


CONTROLLER_NAME_CONTRACT = "controller-manager"


@dataclass(frozen=True)
class Target:
    """A controller deployment expected to become ready."""
    name: str
    label_selector: str
    expected_replicas: int = 1
    name_contract: str = CONTROLLER_NAME_CONTRACT

    def __post_init__(self):
        if self.expected_replicas < 1:
            raise ValueError(
                f"target {self.name} must expect at least 1 replica, got {self.expected_replicas}"
            )


@dataclass(frozen=True)
class DeploymentSnapshot:
    """Kubernetes Deployment as seen by a single query."""
    name: str
    namespace: str
    ready_replicas: int = 0
    deletion_timestamp: Optional[datetime] = None

    @property
    def terminating(self) -> bool:
        return self.deletion_timestamp is not None


@dataclass(frozen=True)
class ClusterTemplateSnapshot:
    """ClusterTemplate validity as reported by the controller."""
    name: str
    namespace: str
    valid: Optional[bool] = None  # None until the controller sets status.valid
    validation_error: Optional[str] = None
