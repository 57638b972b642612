"""
Configuration settings for the legal intake assistant.
"""
import os
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# LLM configuration (query parser)
LLM_CONFIG = {
    "model": os.environ.get("LLM_MODEL", "gemini-2.0-flash-lite"),
    "temperature": float(os.environ.get("LLM_TEMPERATURE", "0.0")),
    "api_key": os.environ.get("LLM_API_KEY", ""),
    "timeout": float(os.environ.get("LLM_TIMEOUT", "10")),  # in seconds
    "max_output_tokens": int(os.environ.get("LLM_MAX_OUTPUT_TOKENS", "150")),
}

# Lawyer directory configuration (PostgREST-compatible API)
DIRECTORY_CONFIG = {
    "base_url": os.environ.get("DIRECTORY_URL", "http://localhost:54321"),
    "api_key": os.environ.get("DIRECTORY_API_KEY", ""),
    "table": os.environ.get("DIRECTORY_TABLE", "lawyers_real"),
    "timeout": float(os.environ.get("DIRECTORY_TIMEOUT", "10")),  # in seconds
    "page_size": int(os.environ.get("DIRECTORY_PAGE_SIZE", "15")),
    "similarity_threshold": float(os.environ.get("SIMILARITY_THRESHOLD", "0.5")),
}

# Redis configuration (for conversation state)
REDIS_CONFIG = {
    "host": os.environ.get("REDIS_HOST", "localhost"),
    "port": int(os.environ.get("REDIS_PORT", "6379")),
    "password": os.environ.get("REDIS_PASSWORD", ""),
    "db": int(os.environ.get("REDIS_DB", "0"))
}

# Conversation state store configuration
STATE_STORE_CONFIG = {
    "backend": os.environ.get("STATE_STORE_BACKEND", "memory"),
    "ttl": int(os.environ.get("STATE_TTL", "86400")),  # in seconds
    "key_prefix": os.environ.get("STATE_KEY_PREFIX", "conversation_state:"),
}

# State merge policy: "overwrite" or "confidence_gated"
MERGE_CONFIG = {
    "policy": os.environ.get("MERGE_POLICY", "overwrite"),
}

# Application configuration
APP_CONFIG = {
    "debug": os.environ.get("DEBUG", "False").lower() == "true",
    "log_level": os.environ.get("LOG_LEVEL", "INFO"),
}

# Feature flags
FEATURES = {
    "use_ai_parser": os.environ.get("USE_AI_PARSER", "True").lower() == "true",
}

def get_config() -> Dict[str, Any]:
    """Return the complete configuration dictionary."""
    return {
        "llm": LLM_CONFIG,
        "directory": DIRECTORY_CONFIG,
        "redis": REDIS_CONFIG,
        "state_store": STATE_STORE_CONFIG,
        "merge": MERGE_CONFIG,
        "app": APP_CONFIG,
        "features": FEATURES
    }
