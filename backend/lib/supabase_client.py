"""
Supabase client for the preference store
"""
import logging
from typing import Optional

from dotenv import load_dotenv
from supabase import Client, create_client

from leetmetric_assistant.config import AssistantConfig

load_dotenv()
load_dotenv('../.env')  # Also try parent directory

logger = logging.getLogger(__name__)

_supabase_client: Optional[Client] = None


def get_supabase_client(config: Optional[AssistantConfig] = None) -> Optional[Client]:
    """
    Get or create the Supabase client singleton.

    Returns None when SUPABASE_URL / SUPABASE_SERVICE_KEY are not set, so the
    caller can fall back to the in-memory store.
    """
    global _supabase_client

    if _supabase_client is None:
        config = config or AssistantConfig.from_env()
        if not config.supabase_configured:
            logger.warning("SUPABASE_URL and SUPABASE_SERVICE_KEY not set - preferences stay in memory")
            return None
        _supabase_client = create_client(config.supabase_url, config.supabase_key)

    return _supabase_client
