"""Template assembly and output for the doc generator."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, TextIO

from ..logging import get_logger
from .collector import PackageSection, SignatureCollector, collect_package_funcs
from .config import DEFAULT_LANG, GendocConfig
from .discovery import discover_files
from .errors import ReadError, WriteError
from .fragments import FragmentLoader

logger = get_logger("gendoc.assembly")

PLACEHOLDER = "{{pgkFuncs}}"


@dataclass
class GenerateResult:
    """Outcome of a generator run."""

    text: str
    output: str
    files: List[str] = field(default_factory=list)
    sections: List[PackageSection] = field(default_factory=list)
    packages: Dict[str, str] = field(default_factory=dict)


def template_filename(
    lang: str,
    *,
    default_lang: str = DEFAULT_LANG,
    allowed_langs: Optional[Sequence[str]] = None,
) -> str:
    """Return the top-level template name for ``lang``."""
    if lang == default_lang:
        return "README.md.tpl"
    if allowed_langs is not None and lang not in allowed_langs:
        logger.warning("Unsupported language %r, using the %s template", lang, default_lang)
        return "README.md.tpl"
    return f"README.{lang}.md.tpl"


def load_template(template_dir: Optional[Path], filename: str) -> Optional[str]:
    """Read the top-level template, or return None when no directory is configured."""
    if template_dir is None:
        return None
    path = template_dir / filename
    logger.info("- read template file contents from %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReadError(f"Cannot read template file {path}: {exc}") from exc


def render(template: Optional[str], body: str) -> str:
    """Substitute the body for the placeholder, or return it as-is without a template."""
    if not template:
        return body
    return template.replace(PLACEHOLDER, body, 1)


def write_output(text: str, output: str, *, stdout: Optional[TextIO] = None) -> None:
    """Write ``text`` to the named file, or to stdout for the ``stdout`` sentinel."""
    if output == "stdout":
        stream = stdout if stdout is not None else sys.stdout
        try:
            stream.write(text)
            stream.flush()
        except OSError as exc:
            raise WriteError(f"Cannot write to stdout: {exc}") from exc
        return

    try:
        with open(output, "w", encoding="utf-8") as handle:
            handle.write(text)
    except OSError as exc:
        raise WriteError(f"Cannot write output file {output}: {exc}") from exc


def generate(config: GendocConfig, *, stdout: Optional[TextIO] = None) -> GenerateResult:
    """Run discovery, collection and assembly, then write the result."""
    files = discover_files(
        config.root,
        config.source_glob,
        hidden=config.hidden,
        test_suffixes=config.test_suffixes,
        platform_suffixes=config.platform_suffixes,
    )

    template_dir = config.template_path()
    template = load_template(
        template_dir,
        template_filename(
            config.lang,
            default_lang=config.default_lang,
            allowed_langs=config.allowed_langs,
        ),
    )

    loader = FragmentLoader(template_dir, config.lang, default_lang=config.default_lang)
    collector = SignatureCollector(
        loader,
        base_pkg=config.package_base(),
        name_map=config.name_map,
        strip_suffix=config.strip_suffix,
        fence_lang=config.fence_lang,
    )
    body = collect_package_funcs(files, config.root, collector).getvalue()

    text = render(template, body)
    write_output(text, config.output, stdout=stdout)

    logger.info("Collected packages:")
    for name, path in collector.packages.items():
        logger.info("  %s => %s", name, path)

    return GenerateResult(
        text=text,
        output=config.output,
        files=files,
        sections=list(collector.sections),
        packages=dict(collector.packages),
    )


__all__ = [
    "PLACEHOLDER",
    "GenerateResult",
    "generate",
    "load_template",
    "render",
    "template_filename",
    "write_output",
]
