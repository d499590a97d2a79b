"""
Token cost estimation for generation requests.

Gemini guidance:
- Text: ~1 token per 4 characters
- Text: ~100 tokens per 60-80 English words (70 used here)
- Images: ~258 tokens per attached image

The larger of the two text estimates is used.
"""

import math
from typing import Dict


CHARS_PER_TOKEN = 4
WORDS_PER_100_TOKENS = 70
MEDIA_ATTACHMENT_TOKENS = 258


class CostEstimator:
    def __init__(self, media_tokens: int = MEDIA_ATTACHMENT_TOKENS):
        self.media_tokens = media_tokens

    def breakdown(self, text: str, has_media_attachment: bool) -> Dict[str, int]:
        char_count = len(text)
        word_count = len(text.split())

        char_tokens = math.ceil(char_count / CHARS_PER_TOKEN)
        word_tokens = math.ceil(word_count * 100 / WORDS_PER_100_TOKENS)
        text_tokens = max(char_tokens, word_tokens)
        media_tokens = self.media_tokens if has_media_attachment else 0

        return {
            'chars': char_count,
            'words': word_count,
            'char_tokens': char_tokens,
            'word_tokens': word_tokens,
            'text_tokens': text_tokens,
            'media_tokens': media_tokens,
            'total': text_tokens + media_tokens,
        }

    def estimate(self, text: str, has_media_attachment: bool) -> int:
        return self.breakdown(text, has_media_attachment)['total']


def estimate_tokens(text: str, has_media_attachment: bool = False) -> int:
    return CostEstimator().estimate(text, has_media_attachment)
