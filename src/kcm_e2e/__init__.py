"""
Readiness verification for the kcm end-to-end suite.
"""
from kcm_e2e.errors import (
    ConvergenceTimeout,
    InsufficientReplicas,
    NameMismatch,
    NotReady,
    QueryError,
    ReadinessError,
    Terminating,
    TemplateInvalid,
    TemplateNotReported,
)
from kcm_e2e.expectations import ExpectationRegistry, ProviderKind, label_for
from kcm_e2e.kube_types import ClusterTemplateSnapshot, DeploymentSnapshot, Target
from kcm_e2e.poller import Poller
from kcm_e2e.prober import probe, verify_controllers_up
from kcm_e2e.templates import validate_cluster_templates

__all__ = [
    "ClusterTemplateSnapshot",
    "ConvergenceTimeout",
    "DeploymentSnapshot",
    "ExpectationRegistry",
    "InsufficientReplicas",
    "NameMismatch",
    "NotReady",
    "Poller",
    "ProviderKind",
    "QueryError",
    "ReadinessError",
    "Target",
    "Terminating",
    "TemplateInvalid",
    "TemplateNotReported",
    "label_for",
    "probe",
    "validate_cluster_templates",
    "verify_controllers_up",
]
