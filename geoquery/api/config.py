# geoquery/api/config.py
"""Configuration management for the geographic query API."""
import os
from dotenv import load_dotenv

load_dotenv()


def get_openai_api_key():
    """Get OpenAI API key from environment."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OPENAI_API_KEY not set")
    return api_key


def get_llm_config():
    """Get chat model configuration."""
    return {
        "model": os.getenv("OPENAI_CHAT_MODEL", "gpt-4.1"),
        "temperature": float(os.getenv("LLM_TEMPERATURE", "0.2")),
        "max_tokens": int(os.getenv("LLM_MAX_TOKENS", "1024")),
        "timeout_seconds": float(os.getenv("LLM_TIMEOUT_SECONDS", "30")),
    }


def get_google_maps_config():
    """Get Google Maps configuration."""
    return {
        "api_key": os.getenv("GOOGLE_MAPS_API_KEY", ""),
        "places_timeout_seconds": float(os.getenv("PLACES_TIMEOUT_SECONDS", "10")),
        "elevation_timeout_seconds": float(os.getenv("ELEVATION_TIMEOUT_SECONDS", "10")),
    }


def get_cors_config():
    """Get CORS configuration for the front-end origin."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return {
        "origins": [origin.strip() for origin in origins.split(",") if origin.strip()],
        "methods": ["POST", "GET", "OPTIONS"],
        "allow_headers": ["Content-Type"],
        "supports_credentials": True,
    }


def get_port():
    """Get port configuration."""
    return int(os.getenv("PORT", 5001))


def get_example_query_count():
    """Get how many example queries to ask the model for."""
    return int(os.getenv("EXAMPLE_QUERY_COUNT", 5))


def describe_keys():
    """Report which API keys are present, without exposing their values."""
    return {
        "OpenAI key": "Loaded" if os.getenv("OPENAI_API_KEY") else "Missing",
        "Maps key": "Loaded" if os.getenv("GOOGLE_MAPS_API_KEY") else "Missing",
    }
