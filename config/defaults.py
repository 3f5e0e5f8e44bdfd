"""Default configuration values."""

DEFAULT_MODEL = "devsharp:latest"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_WORKSPACE = "./workspace"

CONFIG_DIRNAME = ".fileop"
CONFIG_FILENAME = "fileop.jsonc"

# Environment variable overrides
OLLAMA_BASE_URL_ENV = "OLLAMA_BASE_URL"
WORKSPACE_ROOT_ENV = "WORKSPACE_ROOT"
MODEL_ENV = "FILEOP_MODEL"
