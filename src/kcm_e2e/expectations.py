"""
Readiness contracts for the kcm controller and the CAPI provider controllers.
"""
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Union

from kcm_e2e.kube_types import Target


KCM_CONTROLLER_LABEL = "app.kubernetes.io/name=kcm"
KCM_CONTROLLER_NAME = "kcm-controller-manager"
PROVIDER_LABEL_KEY = "cluster.x-k8s.io/provider"


class ProviderKind(str, Enum):
    CAPI = "cluster-api"
    AWS = "infrastructure-aws"
    AZURE = "infrastructure-azure"
    VSPHERE = "infrastructure-vsphere"
    OPENSTACK = "infrastructure-openstack"
    GCP = "infrastructure-gcp"
    DOCKER = "infrastructure-docker"
    K0SMOTRON = "infrastructure-k0sproject-k0smotron"

    def __str__(self) -> str:
        return self.value


# Providers verified when nothing else is configured.
DEFAULT_PROVIDERS = (
    ProviderKind.CAPI,
    ProviderKind.AWS,
    ProviderKind.AZURE,
    ProviderKind.VSPHERE,
)

# Azure ships two controllers (CAPZ and ASO) under the same provider label.
DEFAULT_REPLICA_OVERRIDES: Dict[ProviderKind, int] = {
    ProviderKind.AZURE: 2,
}


def provider_kind(value: Union[str, ProviderKind]) -> ProviderKind:
    """Coerce a provider name, raising ValueError for unknown providers."""
    try:
        return ProviderKind(value)
    except ValueError:
        known = ", ".join(p.value for p in ProviderKind)
        raise ValueError(f"unknown provider {value!r}, expected one of: {known}") from None


def label_for(provider: Union[str, ProviderKind]) -> str:
    """Label selector matching the controller deployments of a provider."""
    return f"{PROVIDER_LABEL_KEY}={provider_kind(provider).value}"


class ExpectationRegistry:
    """Builds the ordered list of targets to verify."""

    def __init__(
        self,
        replica_overrides: Optional[Mapping[Union[str, ProviderKind], int]] = None,
        core_label: str = KCM_CONTROLLER_LABEL,
        core_name: str = KCM_CONTROLLER_NAME,
    ):
        """
        Args:
            replica_overrides: Provider to expected controller count. Providers
                missing from the table expect exactly one controller.
            core_label: Label selector of the core controller deployment
            core_name: Name reported for the core controller target
        """
        if replica_overrides is None:
            replica_overrides = DEFAULT_REPLICA_OVERRIDES
        self.replica_overrides: Dict[ProviderKind, int] = {}
        for provider, replicas in replica_overrides.items():
            kind = provider_kind(provider)
            if replicas < 1:
                raise ValueError(f"replica override for {kind} must be >= 1, got {replicas}")
            self.replica_overrides[kind] = replicas
        self.core_label = core_label
        self.core_name = core_name

    def replicas_for(self, provider: Union[str, ProviderKind]) -> int:
        return self.replica_overrides.get(provider_kind(provider), 1)

    def core_target(self) -> Target:
        return Target(name=self.core_name, label_selector=self.core_label, expected_replicas=1)

    def targets_for(self, providers: Iterable[Union[str, ProviderKind]]) -> List[Target]:
        """
        Get the targets for the core controller and the given providers.

        Args:
            providers: Providers whose controllers must be ready

        Returns:
            The core controller target followed by one target per provider,
            in the order given
        """
        targets = [self.core_target()]
        seen = set()
        for provider in providers:
            kind = provider_kind(provider)
            if kind in seen:
                continue
            seen.add(kind)
            targets.append(Target(
                name=kind.value,
                label_selector=label_for(kind),
                expected_replicas=self.replicas_for(kind),
            ))
        return targets
