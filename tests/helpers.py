from datetime import datetime, timezone

from kcm_e2e.kube_types import ClusterTemplateSnapshot, DeploymentSnapshot


def ready(name, replicas=1):
    return DeploymentSnapshot(name=name, namespace="kcm-system", ready_replicas=replicas)


def not_ready(name):
    return DeploymentSnapshot(name=name, namespace="kcm-system", ready_replicas=0)


def terminating(name):
    return DeploymentSnapshot(
        name=name,
        namespace="kcm-system",
        ready_replicas=1,
        deletion_timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def template(name, valid=True, error=None):
    return ClusterTemplateSnapshot(name=name, namespace="kcm-system", valid=valid, validation_error=error)


class Script:
    """Successive query results; the last one repeats."""

    def __init__(self, *results):
        self.results = list(results)

    def pop(self):
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


class FakeCluster:
    """
    In-memory cluster state keyed by label selector.

    A value is a list of snapshots, an exception to raise, or a Script of
    those consumed one per query.
    """

    def __init__(self, deployments=None, templates=None):
        self.deployments = deployments or {}
        self.templates = templates if templates is not None else []
        self.calls = []

    @staticmethod
    def _resolve(value):
        if isinstance(value, Script):
            value = value.pop()
        if isinstance(value, Exception):
            raise value
        return list(value)

    def list_deployments(self, label_selector, limit):
        self.calls.append((label_selector, limit))
        return self._resolve(self.deployments.get(label_selector, []))

    def list_cluster_templates(self):
        return self._resolve(self.templates)


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds
