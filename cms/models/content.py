"""
Content models for the five CMS content variants.

Each variant has a *Fields model (what a client may send on create) and a
record model (Fields plus id and timestamps, as stored). Wire and storage
keys are camelCase; Python attributes are snake_case.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

RequiredText = Annotated[str, Field(min_length=1)]
CareerType = Literal["Full-time", "Part-time", "Contract", "Internship"]


class ContentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ContentFields(ContentModel):
    title: RequiredText
    description: RequiredText
    tags: List[str] = Field(default_factory=list)
    published: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("published", mode="before")
    @classmethod
    def _published_default(cls, value: Any) -> Any:
        return False if value is None else value


class ContentRecord(ContentModel):
    id: str
    created_at: str
    updated_at: str


class HelpArticleFields(ContentFields):
    category: RequiredText
    content: RequiredText
    video_url: Optional[str] = None
    video_thumbnail: Optional[str] = None


class HelpArticle(HelpArticleFields, ContentRecord):
    pass


class DocumentationFields(ContentFields):
    section: RequiredText  # getting-started | api | user-guide | integrations
    content: RequiredText
    order: int = 0


class Documentation(DocumentationFields, ContentRecord):
    pass


class VideoFields(ContentFields):
    url: RequiredText
    category: RequiredText
    thumbnail: Optional[str] = None
    duration: Optional[str] = None


class Video(VideoFields, ContentRecord):
    pass


class CareerFields(ContentFields):
    department: RequiredText
    location: RequiredText
    type: CareerType
    responsibilities: RequiredText
    qualifications: RequiredText
    benefits: Optional[str] = None
    salary_range: Optional[str] = None
    apply_url: Optional[str] = None


class Career(CareerFields, ContentRecord):
    pass


class BlogPostFields(ContentFields):
    content: RequiredText
    author: str = "Ledger1 Team"
    cover_image: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD, defaults to the creation day


class BlogPost(BlogPostFields, ContentRecord):
    slug: str


@dataclass(frozen=True)
class ContentType:
    """Binds a storage partition to its models and identifier field."""

    doc_type: str
    label: str
    fields_model: Type[ContentFields]
    record_model: Type[ContentRecord]
    id_field: str = "id"


HELP_ARTICLE = ContentType("help-article", "Help article", HelpArticleFields, HelpArticle)
DOCUMENTATION = ContentType("documentation", "Documentation", DocumentationFields, Documentation)
VIDEO = ContentType("video", "Video", VideoFields, Video)
CAREER = ContentType("career", "Career", CareerFields, Career)
BLOG_POST = ContentType("blog-post", "Blog post", BlogPostFields, BlogPost, id_field="slug")

CONTENT_TYPES: Dict[str, ContentType] = {
    ct.doc_type: ct for ct in (HELP_ARTICLE, DOCUMENTATION, VIDEO, CAREER, BLOG_POST)
}
