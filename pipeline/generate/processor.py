import re
from pathlib import Path
from typing import Optional

import requests
from pydantic import BaseModel, Field, ValidationError, field_validator

from infra.llm.budget import BudgetTracker
from infra.llm.cost_estimator import CostEstimator
from infra.llm.gemini import (
    GeminiClient,
    GeminiError,
    EmptyResponseError,
    ProviderResponseError,
    MalformedResponseError,
)
from infra.llm.models import FailureKind, GenerationResult
from infra.pipeline.logger import PipelineLogger

from pipeline.schemas import WorkItem
from .prompts import build_prompt


MEDIA_MIME_TYPE = "image/jpeg"

FENCE_PATTERN = re.compile(r'^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$', re.DOTALL)


class GeneratedPost(BaseModel):
    title: str = Field(..., description="Blog post title")
    content: str = Field(..., description="HTML body")

    @field_validator('title', 'content')
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around the whole response."""
    match = FENCE_PATTERN.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


class ItemProcessor:
    """One work item -> one GenerationResult.

    Item-local failures (missing media, empty or error responses,
    unparseable output) come back as GenerationResult.failure(); nothing
    here raises for them.
    """

    def __init__(
        self,
        client: GeminiClient,
        budget: BudgetTracker,
        media_dir: Path,
        logger: PipelineLogger,
        temperature: float = 0.7,
        estimator: Optional[CostEstimator] = None
    ):
        self.client = client
        self.budget = budget
        self.media_dir = Path(media_dir)
        self.logger = logger
        self.temperature = temperature
        self.estimator = estimator or CostEstimator()

    def process(self, item: WorkItem) -> GenerationResult:
        media_path = self.media_dir / item.filename

        if not item.filename or not media_path.is_file():
            return GenerationResult.failure(FailureKind.NOT_FOUND, f"Image file not found: {media_path}")

        try:
            media_bytes = media_path.read_bytes()
        except OSError as e:
            return GenerationResult.failure(FailureKind.NOT_FOUND, f"Could not read {media_path}: {e}")

        prompt = build_prompt(item.description, item.photographer)
        breakdown = self.estimator.breakdown(prompt, has_media_attachment=True)
        cost = breakdown['total']

        self.logger.debug(
            f"Token estimate: text ~{breakdown['text_tokens']}, media ~{breakdown['media_tokens']}",
            item=item.filename,
            estimated_tokens=cost
        )
        self.budget.admit(cost)

        try:
            response = self.client.generate(
                prompt,
                media_bytes,
                mime_type=MEDIA_MIME_TYPE,
                temperature=self.temperature
            )
        except EmptyResponseError as e:
            kind = FailureKind.TRUNCATED if e.truncated else FailureKind.EMPTY_RESPONSE
            return GenerationResult.failure(kind, str(e))
        except (ProviderResponseError, MalformedResponseError) as e:
            return GenerationResult.failure(FailureKind.PROVIDER_ERROR, str(e))
        except requests.exceptions.RequestException as e:
            return GenerationResult.failure(FailureKind.PROVIDER_ERROR, f"Request failed: {e}")
        except GeminiError as e:
            return GenerationResult.failure(FailureKind.PROVIDER_ERROR, str(e))

        if response.truncated:
            self.logger.warning(
                "Response hit the output token limit; attempting to parse anyway",
                item=item.filename
            )

        self.logger.info(
            "Gemini response received",
            item=item.filename,
            tokens=response.total_tokens,
            estimated_tokens=cost
        )

        try:
            post = GeneratedPost.model_validate_json(strip_code_fences(response.text))
        except ValidationError as e:
            if response.truncated:
                return GenerationResult.failure(FailureKind.TRUNCATED, "Response truncated at output token limit")
            self.logger.debug(f"Unparseable response: {e.errors()[0].get('msg')}", item=item.filename)
            return GenerationResult.failure(FailureKind.PARSE_ERROR, "Failed to parse response")

        return GenerationResult.success(post.title, post.content)
