from supabase import create_client, Client
from judo_hub.config import settings


class SupabaseClient:
    """Factory for Supabase clients.

    Every portal session gets its own client: the auth state (and therefore the
    JWT sent to PostgREST and Storage) lives inside the client, so one client
    must never be shared between callers. Sign-ups performed by an admin also
    use a fresh client so the admin's own session is not replaced.
    """

    @classmethod
    def new_client(cls) -> Client:
        return create_client(settings.supabase_url, settings.supabase_key)
