"""
Kubernetes client for readiness queries.
"""
import logging
from typing import List, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from kcm_e2e.errors import QueryError
from kcm_e2e.kube_types import ClusterTemplateSnapshot, DeploymentSnapshot

logger = logging.getLogger(__name__)

TEMPLATE_GROUP = "k0rdent.mirantis.com"
TEMPLATE_VERSION = "v1beta1"
TEMPLATE_PLURAL = "clustertemplates"


class KubeClient:
    """Read-only view of the management cluster namespace."""

    def __init__(self, namespace: str, in_cluster: bool = False, context: Optional[str] = None,
                 api_client: Optional[client.ApiClient] = None):
        """
        Initialize Kubernetes client.

        Args:
            namespace: Namespace the controllers run in
            in_cluster: Whether running inside cluster (default: False)
            context: Kubernetes context name (optional)
            api_client: Preconfigured API client; skips loading configuration
        """
        self.namespace = namespace
        self.in_cluster = in_cluster

        if api_client is None:
            try:
                if in_cluster:
                    config.load_incluster_config()
                elif context:
                    config.load_kube_config(context=context)
                else:
                    config.load_kube_config()
            except config.ConfigException as e:
                logger.error(f"❌ Failed to load Kubernetes configuration: {e}")
                raise

        self.apps_v1 = client.AppsV1Api(api_client)
        self.custom = client.CustomObjectsApi(api_client)
        logger.info(f"✅ Kubernetes client initialized for namespace: {namespace}")

    @classmethod
    def from_settings(cls, settings) -> "KubeClient":
        return cls(
            namespace=settings.NAMESPACE,
            in_cluster=settings.K8S_IN_CLUSTER,
            context=settings.K8S_CONTEXT,
        )

    def list_deployments(self, label_selector: str, limit: int) -> List[DeploymentSnapshot]:
        """
        List deployments in the namespace.

        Args:
            label_selector: Label selector for filtering
            limit: Maximum number of deployments the API should return

        Returns:
            List of DeploymentSnapshot objects

        Raises:
            QueryError: The API request failed
        """
        try:
            deployments = self.apps_v1.list_namespaced_deployment(
                namespace=self.namespace,
                label_selector=label_selector,
                limit=limit,
            )
        except (ApiException, HTTPError, OSError) as e:
            logger.error(f"Failed to list deployments with selector {label_selector}: {e}")
            raise QueryError(label_selector, f"{type(e).__name__}: {e}") from e

        snapshots = []
        for deployment in deployments.items:
            status = deployment.status
            snapshots.append(DeploymentSnapshot(
                name=deployment.metadata.name,
                namespace=deployment.metadata.namespace,
                ready_replicas=(status.ready_replicas if status else None) or 0,
                deletion_timestamp=deployment.metadata.deletion_timestamp,
            ))

        logger.debug(f"Retrieved {len(snapshots)} deployments matching {label_selector}")
        return snapshots

    def list_cluster_templates(self) -> List[ClusterTemplateSnapshot]:
        """
        List ClusterTemplate objects in the namespace.

        Raises:
            QueryError: The API request failed
        """
        try:
            result = self.custom.list_namespaced_custom_object(
                group=TEMPLATE_GROUP,
                version=TEMPLATE_VERSION,
                namespace=self.namespace,
                plural=TEMPLATE_PLURAL,
            )
        except (ApiException, HTTPError, OSError) as e:
            logger.error(f"Failed to list cluster templates: {e}")
            raise QueryError(TEMPLATE_PLURAL, f"{type(e).__name__}: {e}") from e

        templates = []
        for item in result.get("items", []):
            metadata = item.get("metadata", {})
            status = item.get("status") or {}
            valid = status.get("valid")
            templates.append(ClusterTemplateSnapshot(
                name=metadata.get("name", ""),
                namespace=metadata.get("namespace", self.namespace),
                valid=bool(valid) if valid is not None else None,
                validation_error=status.get("validationError") or None,
            ))

        logger.debug(f"Retrieved {len(templates)} cluster templates from namespace {self.namespace}")
        return templates
