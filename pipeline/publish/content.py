import html
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pipeline.schemas import EnrichedItem


POTENTIAL_TAGS = [
    'photography', 'travel', 'architecture', 'nature', 'landscape',
    'cityscape', 'street', 'portrait', 'art', 'culture', 'history',
    'adventure', 'explore', 'journey', 'wanderlust', 'scenic',
    'beautiful', 'inspiration', 'creative', 'artistic', 'visual',
]

GENERIC_TAGS = ['photography', 'visual', 'inspiration', 'art']

MAX_TAGS = 4
MIN_TAGS = 2


def generate_tags(title: str, html_content: str) -> List[str]:
    """Keyword tags found in the title and text, padded with generic ones."""
    text = f"{title} {html_content}".lower()
    text = re.sub(r'<[^>]+>', ' ', text)

    tags = [tag for tag in POTENTIAL_TAGS if tag in text][:MAX_TAGS]

    if len(tags) < MIN_TAGS:
        for tag in GENERIC_TAGS:
            if tag not in tags and len(tags) < MAX_TAGS:
                tags.append(tag)

    return tags


def photo_credit_html(photographer: str, photo_title: str, photo_url: str) -> str:
    photographer = html.escape(photographer or "Unknown")
    photo_title = html.escape(photo_title or "Untitled")
    photo_url = html.escape(photo_url or "https://unsplash.com", quote=True)

    return (
        '<div class="photo-credit" style="margin-top: 2rem; padding: 1rem; '
        'border-left: 4px solid #e1e1e1; background: #f8f8f8;">\n'
        '    <p style="margin: 0; font-size: 0.9rem; color: #666;">\n'
        '        <strong>Photo Credit:</strong>\n'
        f'        <em>{photo_title}</em> by\n'
        f'        <a href="{photo_url}" target="_blank" rel="noopener">{photographer}</a>\n'
        '        on <a href="https://unsplash.com" target="_blank" rel="noopener">Unsplash</a>\n'
        '    </p>\n'
        '</div>'
    )


def build_payload(
    item: EnrichedItem,
    feature_image_url: str = "",
    content_type: str = "post",
    status: str = "draft",
    author_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Ghost Admin API body for one post/page (`{"posts": [...]}` or `{"pages": [...]}`)."""
    now = now or datetime.now(timezone.utc)
    timestamp = now.strftime("%Y-%m-%dT%H:%M:%S.000Z")

    content: Dict[str, Any] = {
        "title": item.title,
        "html": item.body + photo_credit_html(item.photographer, item.description, item.photo_url),
        "status": status,
        "created_at": timestamp,
        "updated_at": timestamp,
    }

    if feature_image_url and feature_image_url.strip():
        content["feature_image"] = feature_image_url

    if author_id and author_id.strip():
        content["authors"] = [{"id": author_id}]

    tags = generate_tags(item.title, item.body)
    if tags:
        content["tags"] = [{"name": tag} for tag in tags]

    key = "posts" if content_type == "post" else "pages"
    return {key: [content]}


def created_url(body: Any, content_type: str = "post") -> Optional[str]:
    if not isinstance(body, dict):
        return None
    key = "posts" if content_type == "post" else "pages"
    entries = body.get(key) or []
    if entries and isinstance(entries[0], dict):
        return entries[0].get('url')
    return None


def error_summary(body: Any) -> str:
    """Readable message from a Ghost error body ({"errors": [{"message": ...}]})."""
    if isinstance(body, dict) and body.get('errors'):
        messages = []
        for err in body['errors']:
            if isinstance(err, dict):
                detail = err.get('context') or err.get('details')
                message = err.get('message', 'Unknown error')
                messages.append(f"{message} ({detail})" if isinstance(detail, str) and detail else message)
            else:
                messages.append(str(err))
        return "; ".join(messages)
    text = body if isinstance(body, str) else str(body)
    return text[:500]
