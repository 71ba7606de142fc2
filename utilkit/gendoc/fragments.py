"""Per-package documentation fragments injected around collected signatures."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..logging import get_logger

logger = get_logger("gendoc.fragments")

START = "start"
END = "end"

_NAME_TEMPLATES = {
    START: "part-{name}-s{lang}.md",
    END: "part-{name}{lang}.md",
}


class FragmentLoader:
    """Loads start/end fragments, falling back to the default language."""

    def __init__(
        self,
        template_dir: Optional[Path],
        lang: str,
        *,
        default_lang: str = "en",
    ) -> None:
        self.template_dir = template_dir
        self.lang = lang
        self.default_lang = default_lang

    def filename(self, kind: str, name: str, lang: Optional[str] = None) -> str:
        """Build the fragment filename for ``kind`` and package ``name``."""
        try:
            template = _NAME_TEMPLATES[kind]
        except KeyError:
            raise ValueError(f"Unknown fragment kind: {kind!r}") from None
        lang = self.lang if lang is None else lang
        suffix = "" if lang == self.default_lang else f".{lang}"
        return template.format(name=name, lang=suffix)

    def load(self, kind: str, name: str) -> str:
        """Return fragment text, or an empty string when no fragment exists."""
        text = self._read(self.filename(kind, name))
        if text is None and self.lang != self.default_lang:
            text = self._read(self.filename(kind, name, self.default_lang))
        return text or ""

    def _read(self, filename: str) -> Optional[str]:
        if self.template_dir is None:
            return None
        path = self.template_dir / filename
        try:
            body = path.read_text(encoding="utf-8")
        except OSError:
            return None
        if not body:
            return None
        logger.info("- find and inject sub-package doc: %s", filename)
        return body


__all__ = ["END", "START", "FragmentLoader"]
