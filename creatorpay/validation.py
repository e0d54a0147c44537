"""
Invoice document validation.

The validator only produces a verdict; it never reads document contents.
``LocalFileValidator`` checks that the stored reference points at a PDF
inside the invoice directory. References that resolve outside it are
rejected without touching the filesystem.
"""
from __future__ import annotations

import logging
import pathlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from creatorpay.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationVerdict:
    status: str  # valid | invalid
    notes: str


class DocumentValidator(ABC):
    @abstractmethod
    def validate(self, file_url: str, expected_total: Decimal) -> ValidationVerdict:
        ...


class LocalFileValidator(DocumentValidator):
    def __init__(self, root: Optional[str | pathlib.Path] = None):
        self.root = pathlib.Path(root or settings.INVOICE_DIR).resolve()

    def _resolve(self, file_url: str) -> Optional[pathlib.Path]:
        """Relative references are taken from ``root``; ``None`` if outside it."""
        path = (self.root / file_url).resolve()
        if not path.is_relative_to(self.root):
            return None
        return path

    def validate(self, file_url: str, expected_total: Decimal) -> ValidationVerdict:
        path = self._resolve(file_url)
        if path is None:
            logger.warning("Invoice reference outside %s rejected: %s", self.root, file_url)
            return ValidationVerdict("invalid", "File must be stored in the invoice directory")
        if not path.is_file():
            logger.warning("Invoice file missing: %s", file_url)
            return ValidationVerdict("invalid", "File not found or corrupted")
        if path.suffix.lower() != ".pdf":
            return ValidationVerdict("invalid", "Only PDF invoices are accepted")
        logger.info("Invoice file %s accepted (expected total %s)", file_url, expected_total)
        return ValidationVerdict("valid", "Invoice file present")


_validator: Optional[DocumentValidator] = None


def get_validator() -> DocumentValidator:
    global _validator
    if _validator is None:
        _validator = LocalFileValidator()
    return _validator
