# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - embed.py: Video / map URL to iframe URL conversion
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.embed import extract_iframe_src, map_embed_url, video_embed_url

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Embeds
    "extract_iframe_src",
    "map_embed_url",
    "video_embed_url",
]
