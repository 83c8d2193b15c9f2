"""
Configuration settings for the e2e suite.
"""
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kcm_e2e.expectations import DEFAULT_PROVIDERS, ProviderKind, provider_kind


class Settings(BaseSettings):
    """Suite settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Management cluster
    NAMESPACE: str = Field(default="kcm-system", description="System namespace of the controllers")
    K8S_CONTEXT: Optional[str] = Field(default=None, description="Kubernetes context")
    K8S_IN_CLUSTER: bool = Field(default=False, description="Running in cluster")

    # Suite behaviour
    NO_CLEANUP: str = Field(default="", description="Non-empty to keep the controllers after the suite")
    UPGRADE_REQUIRED: bool = Field(default=False, description="Install stable templates for upgrade tests")
    PROVIDERS: str = Field(
        default=",".join(p.value for p in DEFAULT_PROVIDERS),
        description="Comma separated providers whose controllers must be ready",
    )

    # Timing
    CONTROLLER_TIMEOUT_SECS: float = Field(default=15 * 60, gt=0, description="Controller readiness budget")
    TEMPLATE_TIMEOUT_SECS: float = Field(default=15 * 60, gt=0, description="Template validity budget")
    POLL_INTERVAL_SECS: float = Field(default=10, gt=0, description="Poll interval")
    COMMAND_TIMEOUT_SECS: float = Field(default=30 * 60, gt=0, description="Timeout of each make invocation")

    # Tooling
    REPO_ROOT: str = Field(default=".", description="Directory make is run from")
    SUPPORT_BUNDLE_DIR: str = Field(default="test/e2e", description="Support bundle output directory")
    LOG_LEVEL: str = Field(default="info", description="Log level: info|debug|warning")

    @field_validator("PROVIDERS")
    @classmethod
    def _check_providers(cls, value: str) -> str:
        for name in value.split(","):
            if name.strip():
                provider_kind(name.strip())
        return value

    @property
    def providers(self) -> List[ProviderKind]:
        return [provider_kind(name.strip()) for name in self.PROVIDERS.split(",") if name.strip()]

    @property
    def cleanup(self) -> bool:
        return self.NO_CLEANUP == ""

    def show(self) -> str:
        """Render the effective configuration for the suite log."""
        lines = []
        for name in type(self).model_fields:
            lines.append(f"  {name}: {getattr(self, name)}")
        return "\n".join(lines)
