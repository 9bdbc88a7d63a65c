from .content import (
    BLOG_POST,
    CAREER,
    CONTENT_TYPES,
    DOCUMENTATION,
    HELP_ARTICLE,
    VIDEO,
    BlogPost,
    Career,
    ContentRecord,
    ContentType,
    Documentation,
    HelpArticle,
    Video,
)
from .user import ROLES, Role, Session, User

__all__ = [
    "BLOG_POST",
    "CAREER",
    "CONTENT_TYPES",
    "DOCUMENTATION",
    "HELP_ARTICLE",
    "VIDEO",
    "BlogPost",
    "Career",
    "ContentRecord",
    "ContentType",
    "Documentation",
    "HelpArticle",
    "Video",
    "ROLES",
    "Role",
    "Session",
    "User",
]
