"""Configuration for model provider clients."""

from pydantic import BaseModel, Field

from ..config import LLM_PROVIDER


class ProviderClientConfig(BaseModel):
    """Connection settings of one provider client."""

    provider: LLM_PROVIDER
    api_key: str = Field(exclude=True, repr=False)
    model: str | None = Field(
        default=None, description="Model name, or the provider default when unset"
    )
    base_url: str | None = Field(
        default=None, description="API root, or the provider default when unset"
    )
    max_retries: int = Field(default=3, ge=0)
    timeout: float = Field(default=30.0, gt=0, description="Per-call timeout (s)")
    retry_base_delay: float = Field(
        default=1.0, ge=0, description="Delay before the first retry (s)"
    )
