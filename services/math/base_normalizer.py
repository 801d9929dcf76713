"""
Base Normalizer

Abstract base class for rewrite pipelines that turn spoken input into a
canonical form one named pass at a time.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple


# A pass takes the current text and the compiled matcher set
RewritePass = Callable[[str, Any], str]


@dataclass
class NormalizationResult:
    """Result from normalization."""
    value: str
    is_valid: bool
    steps: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class BaseNormalizer(ABC):
    """
    Abstract base class for pass-based normalizers.

    Subclasses provide:
    - passes(): the ordered (name, function) rewrite passes
    - validate(): check that the output is in the target alphabet
    """

    max_length: Optional[int] = None

    @abstractmethod
    def passes(self) -> Sequence[Tuple[str, RewritePass]]:
        """Ordered rewrite passes; the order is part of the contract."""

    @abstractmethod
    def validate(self, text: str) -> Tuple[bool, List[str]]:
        """
        Validate normalized output.

        Returns:
            Tuple of (is_valid, error messages)
        """

    def normalize(self, text: str, compiled: Any) -> str:
        """Run every pass over cleaned input and return the result."""
        result = self.clean_input(text)
        for _, rewrite in self.passes():
            result = rewrite(result, compiled)
        return result

    def process(self, text: str, compiled: Any) -> NormalizationResult:
        """
        Full processing pipeline: clean → passes → validate, with a trace.

        Only passes that changed the text are recorded in ``steps``.
        """
        steps = []

        cleaned = self.clean_input(text)
        if cleaned != text:
            steps.append(f"Cleaned: '{text}' → '{cleaned}'")

        result = cleaned
        for name, rewrite in self.passes():
            rewritten = rewrite(result, compiled)
            if rewritten != result:
                steps.append(f"{name}: '{result}' → '{rewritten}'")
            result = rewritten

        is_valid, errors = self.validate(result)
        return NormalizationResult(value=result, is_valid=is_valid, steps=steps, errors=errors)

    def clean_input(self, text: str) -> str:
        """
        Common pre-processing: lower-case, trim, truncate.

        Args:
            text: Raw input

        Returns:
            Cleaned input
        """
        if not text:
            return ""
        cleaned = text.strip().lower()
        if self.max_length is not None and len(cleaned) > self.max_length:
            cleaned = cleaned[: self.max_length]
        return cleaned
