"""
Suite lifecycle: deploy the controllers, wait for them, tear them down.
"""
import logging
from functools import partial
from typing import Callable, Optional

from kcm_e2e.config import Settings
from kcm_e2e.expectations import ExpectationRegistry
from kcm_e2e.kube_client import KubeClient
from kcm_e2e.poller import Poller
from kcm_e2e.prober import verify_controllers_up
from kcm_e2e.shell import collect_support_bundle, make
from kcm_e2e.templates import validate_cluster_templates

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Apply LOG_LEVEL to the kcm_e2e loggers, also when pytest owns the root handlers."""
    level = settings.LOG_LEVEL.upper()
    logging.basicConfig(level=level)
    logging.getLogger("kcm_e2e").setLevel(level)


def before_suite(
    settings: Settings,
    runner: Callable[..., str] = make,
    client_factory: Callable[[Settings], KubeClient] = KubeClient.from_settings,
    poller_factory: Callable[..., Poller] = Poller,
    registry: Optional[ExpectationRegistry] = None,
) -> KubeClient:
    """
    Deploy the controllers and wait until the management cluster is usable.

    Raises:
        CommandError: A make target failed
        ConvergenceTimeout: Controllers or templates did not converge in time
    """
    logger.info("🚀 Starting kcm suite")
    runner("test-apply", cwd=settings.REPO_ROOT, timeout=settings.COMMAND_TIMEOUT_SECS)

    if settings.UPGRADE_REQUIRED:
        logger.info("installing stable templates for further upgrade testing")
        runner("stable-templates", cwd=settings.REPO_ROOT, timeout=settings.COMMAND_TIMEOUT_SECS)

    logger.info("validating that the kcm-controller and CAPI provider controllers are running and ready")
    kc = client_factory(settings)
    targets = (registry or ExpectationRegistry()).targets_for(settings.providers)
    poller_factory(settings.CONTROLLER_TIMEOUT_SECS, settings.POLL_INTERVAL_SECS).until_converged(
        partial(verify_controllers_up, targets, kc), "Controller validation",
    )

    poller_factory(settings.TEMPLATE_TIMEOUT_SECS, settings.POLL_INTERVAL_SECS).until_converged(
        partial(validate_cluster_templates, kc), "Cluster template validation",
    )

    logger.info(f"E2e testing configuration:\n{settings.show()}")
    return kc


def after_suite(
    settings: Settings,
    runner: Callable[..., str] = make,
    bundle: Callable[..., object] = collect_support_bundle,
) -> bool:
    """Collect diagnostics and remove the controllers unless NO_CLEANUP is set."""
    if not settings.cleanup:
        logger.info("NO_CLEANUP is set, leaving the controllers in place")
        return False

    logger.info("collecting the support bundle from the management cluster")
    bundle(
        "",
        output_dir=settings.SUPPORT_BUNDLE_DIR,
        cwd=settings.REPO_ROOT,
        timeout=settings.COMMAND_TIMEOUT_SECS,
    )

    logger.info("removing the controller-manager")
    runner("dev-destroy", cwd=settings.REPO_ROOT, timeout=settings.COMMAND_TIMEOUT_SECS)
    return True
