from .base import Backend, Row
from .memory import MemoryBackend
from .supabase_rest import SupabaseRestBackend

from jobsphere.config import backend_mode, load_settings, supabase_credentials
from jobsphere.errors import ConfigError
from jobsphere.log import get_logger

log = get_logger(__name__)

__all__ = [
    "Backend", "Row", "MemoryBackend", "SupabaseRestBackend",
    "get_backend", "uses_supabase",
]


def uses_supabase() -> bool:
    """Whether the configured mode resolves to the hosted backend."""
    mode = backend_mode()
    url, key = supabase_credentials()
    if mode == "supabase":
        if not (url and key):
            raise ConfigError(
                "Application configuration error: set SUPABASE_URL and "
                "SUPABASE_ANON_KEY in .env"
            )
        return True
    if mode == "memory":
        return False
    return bool(url and key)


def get_backend(settings: dict | None = None) -> Backend:
    settings = settings or load_settings()

    if uses_supabase():
        url, key = supabase_credentials()
        timeout = settings.get("backend", {}).get("request_timeout", 15)
        log.info("Registered backend: Supabase (%s)", url)
        return SupabaseRestBackend(url, key, timeout=timeout)

    if backend_mode() == "auto":
        log.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set, using the in-memory demo backend")
    else:
        log.info("Registered backend: in-memory demo")
    return MemoryBackend.from_seed_file()
