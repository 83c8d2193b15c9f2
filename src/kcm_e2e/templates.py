"""
Validity check for ClusterTemplate objects.
"""
import logging
from typing import List, Protocol

from kcm_e2e.errors import QueryError, TemplateInvalid, TemplateNotReported
from kcm_e2e.kube_types import ClusterTemplateSnapshot

logger = logging.getLogger(__name__)


class TemplateQuery(Protocol):
    def list_cluster_templates(self) -> List[ClusterTemplateSnapshot]:
        ...


def validate_cluster_templates(query: TemplateQuery) -> None:
    """Fail unless every ClusterTemplate reports status.valid=true."""
    try:
        templates = query.list_cluster_templates()
    except QueryError as e:
        raise QueryError("clustertemplates", f"failed to list cluster templates: {e.detail}") from e

    for template in templates:
        if template.valid is None:
            raise TemplateNotReported(template.name, "valid flag not found in status")
        if not template.valid:
            raise TemplateInvalid(
                template.name,
                f"template is still invalid: {template.validation_error or 'no validation error reported'}",
            )

    logger.debug(f"{len(templates)} cluster template(s) valid")
