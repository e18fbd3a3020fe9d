from judo_hub.config.settings import settings

__all__ = ["settings"]
