"""Main Config model."""

from pydantic import BaseModel, Field

from core.permissions import PolicySettings

from .defaults import DEFAULT_MODEL, DEFAULT_OLLAMA_BASE_URL, DEFAULT_WORKSPACE


class Config(BaseModel):
    """Main configuration model."""

    ollama_base_url: str = Field(
        default=DEFAULT_OLLAMA_BASE_URL,
        description="Base URL of the Ollama server",
    )
    workspace_root: str = Field(
        default=DEFAULT_WORKSPACE,
        description="Directory the agent may operate in",
    )
    default_model: str = Field(
        default=DEFAULT_MODEL,
        description="Model used for generation",
    )
    permissions: PolicySettings = Field(
        default_factory=PolicySettings,
        description="Permission policy",
    )
