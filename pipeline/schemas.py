"""
Item schemas shared by the three stages.

WorkItem is one row of the listing artifact (image_metadata.csv).
EnrichedItem is one element of the enriched artifact: the listing fields
plus the generated `title`/`body` (or an `Error: ...` marker in `title`).
PublishRecord is one element of the publish report.
"""

from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from infra.llm.models import GenerationFailure, GenerationResult


LISTING_COLUMNS = [
    'filename',
    'id',
    'description',
    'alt_description',
    'photographer',
    'photographer_username',
    'width',
    'height',
    'likes',
    'downloads',
    'created_at',
    'updated_at',
    'color',
    'blur_hash',
    'download_url',
    'photo_url',
]

# Columns the generate stage reads; a listing without them is unusable
REQUIRED_COLUMNS = ('filename', 'id', 'description', 'photographer')

INT_COLUMNS = ('width', 'height', 'likes', 'downloads')

ERROR_MARKER = "Error:"


class WorkItem(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    filename: str = Field("", description="Media file name beside the listing (<id>.jpg)")
    id: str = Field("", description="Unsplash photo id")
    description: str = Field("", description="Photographer-supplied description")
    alt_description: str = Field("", description="Unsplash alt text")
    photographer: str = Field("", description="Photographer display name")
    photographer_username: str = Field("")
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    likes: Optional[int] = Field(None, ge=0)
    downloads: Optional[int] = Field(None, ge=0)
    created_at: str = Field("")
    updated_at: str = Field("")
    color: str = Field("", description="Dominant color (hex)")
    blur_hash: str = Field("")
    download_url: str = Field("", description="Full-size image URL")
    photo_url: str = Field("", description="Photo page on unsplash.com")

    _result: Optional[GenerationResult] = PrivateAttr(default=None)

    @field_validator(*INT_COLUMNS, mode='before')
    @classmethod
    def counter_or_none(cls, v):
        # Listings from older runs carry "null" or "" where Unsplash had no value
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(v) if isinstance(v, (int, float)) else int(str(v).strip())
        except (ValueError, OverflowError):
            return None

    @field_validator(
        'filename', 'id', 'description', 'alt_description', 'photographer',
        'photographer_username', 'created_at', 'updated_at', 'color',
        'blur_hash', 'download_url', 'photo_url',
        mode='before'
    )
    @classmethod
    def none_is_blank(cls, v):
        if v is None:
            return ""
        return str(v)

    @classmethod
    def from_photo(cls, photo: Dict[str, Any]) -> "WorkItem":
        """Map an Unsplash photo object to a listing row."""
        user = photo.get('user') or {}
        urls = photo.get('urls') or {}
        links = photo.get('links') or {}
        photo_id = str(photo.get('id', ""))

        return cls(
            filename=f"{photo_id}.jpg",
            id=photo_id,
            description=photo.get('description'),
            alt_description=photo.get('alt_description'),
            photographer=user.get('name'),
            photographer_username=user.get('username'),
            width=photo.get('width'),
            height=photo.get('height'),
            likes=photo.get('likes'),
            downloads=photo.get('downloads') or 0,
            created_at=photo.get('created_at'),
            updated_at=photo.get('updated_at'),
            color=photo.get('color'),
            blur_hash=photo.get('blur_hash'),
            download_url=urls.get('full'),
            photo_url=links.get('html'),
        )

    def listing_row(self) -> Dict[str, Any]:
        return {column: getattr(self, column) for column in LISTING_COLUMNS}

    @property
    def result(self) -> Optional[GenerationResult]:
        return self._result

    def attach_result(self, result: GenerationResult) -> None:
        if self._result is not None:
            raise ValueError(f"Result already attached to item {self.id}")
        self._result = result

    def enriched_record(self) -> Dict[str, Any]:
        """Listing fields plus title/body. Failures carry an `Error: ...` marker."""
        if self._result is None:
            raise ValueError(f"No result attached to item {self.id}")

        record = self.listing_row()
        if isinstance(self._result, GenerationFailure):
            record.update({
                'title': self._result.marker,
                'body': "",
                'error_kind': self._result.kind.value,
            })
        else:
            record.update({
                'title': self._result.title,
                'body': self._result.body,
                'error_kind': None,
            })
        return record


class EnrichedItem(WorkItem):
    # blog_title/blog_content: field names of enriched files from older runs
    title: str = Field("", validation_alias=AliasChoices('title', 'blog_title'))
    body: str = Field("", validation_alias=AliasChoices('body', 'blog_content'))
    error_kind: Optional[str] = None

    @field_validator('title', 'body', mode='before')
    @classmethod
    def text_or_blank(cls, v):
        return "" if v is None else str(v)

    @property
    def skip_reason(self) -> Optional[str]:
        if self.title.startswith(ERROR_MARKER):
            return f"Content generation failed - {self.title}"
        if not self.title.strip() or not self.body.strip():
            return "Missing blog title or content"
        return None


class PublishRecord(BaseModel):
    id: str
    filename: str
    title: str
    status: str = Field(..., description="published, failed, skipped or dry_run")
    http_status: Optional[int] = None
    url: Optional[str] = None
    error: Optional[str] = None


def missing_columns(header: List[str]) -> List[str]:
    return [column for column in REQUIRED_COLUMNS if column not in header]
