"""
Token estimation for LLM prompts (tiktoken).
"""

import logging
from typing import Optional

import tiktoken

from course_pipeline.config import settings

logger = logging.getLogger(__name__)


class TokenEstimator:
    """
    Counts tokens of a prompt with the model's BPE encoding.

    The encoding is loaded on first use (tiktoken may download it).

    Usage:
        estimator = TokenEstimator()
        tokens = estimator.estimate(prompt)
    """

    def __init__(self, encoding_name: Optional[str] = None):
        self.encoding_name = encoding_name or settings.llm_tokenizer_encoding
        self._encoding: Optional[tiktoken.Encoding] = None

    @property
    def encoding(self) -> tiktoken.Encoding:
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self.encoding_name)
            logger.debug(f"Loaded tokenizer encoding: {self.encoding_name}")
        return self._encoding

    def estimate(self, text: str) -> int:
        """Number of tokens `text` encodes to."""
        return len(self.encoding.encode(text))

    def __call__(self, text: str) -> int:
        return self.estimate(text)
