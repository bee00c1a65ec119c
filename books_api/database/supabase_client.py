from fastapi import Request
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from books_api.config import Settings


def _client_options() -> AsyncClientOptions:
    # One instance per client; the SDK writes auth headers into it
    return AsyncClientOptions(persist_session=False, auto_refresh_token=False)


class SupabaseClients:
    """Identity and store clients, created once at startup and shared read-only."""

    auth: AsyncClient = None
    store: AsyncClient = None

    def __init__(self, settings: Settings):
        self.settings = settings

    async def connect(self) -> "SupabaseClients":
        self.auth = await acreate_client(
            self.settings.supabase_url, self.settings.supabase_anon_key, options=_client_options()
        )
        self.store = await acreate_client(
            self.settings.supabase_url, self.settings.store_key, options=_client_options()
        )
        return self


def get_supabase_clients(request: Request) -> SupabaseClients:
    return request.app.state.supabase


def get_auth_client(request: Request) -> AsyncClient:
    return get_supabase_clients(request).auth


def get_store_client(request: Request) -> AsyncClient:
    """Client with service_role key; bypasses RLS, so ownership is checked in the routes."""
    return get_supabase_clients(request).store
