from .content_repository import ContentRepository, slugify

__all__ = ["ContentRepository", "slugify"]
