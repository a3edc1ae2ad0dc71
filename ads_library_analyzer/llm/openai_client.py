"""
Shared OpenAI client setup.
"""

from openai import OpenAI

from ads_library_analyzer.config import Settings, get_openai_api_key


def get_openai_client(settings: Settings | None = None) -> OpenAI:
    """
    Get OpenAI client instance.

    Raises:
        MissingCredentialError: If OPENAI_API_KEY is not configured
    """
    api_key = get_openai_api_key(settings)
    return OpenAI(api_key=api_key)
