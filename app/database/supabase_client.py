from supabase import create_client, Client
from app.config import settings


class SupabaseClient:
    _client: Client = None
    _admin_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_admin_client(cls) -> Client:
        """Client with the service_role key; needed for auth.admin calls (identity rollback, password change)."""
        if cls._admin_client is None and settings.supabase_service_role_key:
            cls._admin_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._admin_client or cls.get_client()


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_supabase_admin() -> Client:
    return SupabaseClient.get_admin_client()
