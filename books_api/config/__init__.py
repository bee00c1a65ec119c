from books_api.config.settings import settings, Settings

__all__ = ["settings", "Settings"]
