"""Exported signature collection, grouped into per-package sections."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from ..logging import get_logger
from .discovery import package_key
from .errors import ReadError
from .fragments import END, START, FragmentLoader

logger = get_logger("gendoc.collector")

# Exported declarations start with an uppercase letter. Methods with a
# receiver ("func (t *T) Name") and multi-line signatures are not matched.
SIGNATURE_PATTERN = re.compile(r"func [A-Z]\w+\(.*\).*")

FENCE = "```"


def extract_signatures(text: str) -> List[str]:
    """Return exported function signatures found in ``text``, body brace trimmed."""
    return [match.rstrip("{ ") for match in SIGNATURE_PATTERN.findall(text)]


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


@dataclass(frozen=True)
class PackageName:
    """Raw directory name of a package and the title shown in the docs."""

    raw: str
    display: str

    @classmethod
    def from_dir(
        cls,
        dirname: str,
        name_map: Mapping[str, str],
        strip_suffix: str = "util",
    ) -> "PackageName":
        name = dirname
        if strip_suffix and name.endswith(strip_suffix) and name != strip_suffix:
            name = name[: -len(strip_suffix)]
        return cls(raw=dirname, display=name_map.get(name, name))


@dataclass
class PackageSection:
    """One heading plus fenced block of signatures for a package."""

    name: PackageName
    path: str
    signatures: List[str] = field(default_factory=list)
    start_doc: str = ""
    end_doc: str = ""


class OutputBuffer:
    """Append-only text buffer for the generated document body."""

    def __init__(self) -> None:
        self._parts: List[str] = []

    def write(self, text: str) -> None:
        self._parts.append(text)

    def writeln(self, *values: str) -> None:
        self._parts.append(" ".join(values) + "\n")

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        return sum(len(part) for part in self._parts)


class SectionState(Enum):
    NO_SECTION = "no_section"
    SECTION_OPEN = "section_open"


class SignatureCollector:
    """Feeds source files through a two-state section machine.

    A new section opens whenever a file's package differs from the previous
    file's package. ``finish`` must be called once input is exhausted.
    """

    def __init__(
        self,
        loader: FragmentLoader,
        *,
        base_pkg: str,
        name_map: Optional[Mapping[str, str]] = None,
        strip_suffix: str = "util",
        fence_lang: str = "go",
        buffer: Optional[OutputBuffer] = None,
    ) -> None:
        self.loader = loader
        self.base_pkg = base_pkg.rstrip("/")
        self.name_map = dict(name_map or {})
        self.strip_suffix = strip_suffix
        self.fence_lang = fence_lang
        self.buffer = buffer if buffer is not None else OutputBuffer()
        self.state = SectionState.NO_SECTION
        self.sections: List[PackageSection] = []
        # raw package name => full package path
        self.packages: Dict[str, str] = {}
        self._current_key: Optional[str] = None

    @property
    def current(self) -> Optional[PackageSection]:
        if self.state is SectionState.SECTION_OPEN:
            return self.sections[-1]
        return None

    def feed(self, path: str, text: str) -> List[str]:
        """Collect signatures from one file and return them."""
        key = package_key(path)
        if self.state is SectionState.NO_SECTION or key != self._current_key:
            self._close_section()
            self._open_section(key)

        signatures = extract_signatures(text)
        if signatures:
            self.buffer.writeln("// source at", path)
            for line in signatures:
                self.buffer.writeln(line)
            self.sections[-1].signatures.extend(signatures)
        return signatures

    def finish(self) -> OutputBuffer:
        """Close the open section, if any, and return the buffer."""
        self._close_section()
        return self.buffer

    def _open_section(self, key: str) -> None:
        name = PackageName.from_dir(key, self.name_map, self.strip_suffix)
        pkg_path = f"{self.base_pkg}/{key}" if self.base_pkg else key
        self.packages[key] = pkg_path

        self.buffer.writeln("\n###", upper_first(name.display))
        self.buffer.write(f"\n> Package `{pkg_path}`\n\n")

        section = PackageSection(name=name, path=pkg_path)
        section.start_doc = self._write_doc(START, name.display)
        self.buffer.writeln(FENCE + self.fence_lang)

        self.sections.append(section)
        self._current_key = key
        self.state = SectionState.SECTION_OPEN

    def _close_section(self) -> None:
        section = self.current
        if section is None:
            return
        self.buffer.writeln(FENCE)
        section.end_doc = self._write_doc(END, section.name.display)
        self.state = SectionState.NO_SECTION

    def _write_doc(self, kind: str, name: str) -> str:
        doc = self.loader.load(kind, name)
        if doc:
            self.buffer.writeln(doc)
        return doc


def collect_package_funcs(
    files: Iterable[str],
    root: Path,
    collector: SignatureCollector,
) -> OutputBuffer:
    """Read each file under ``root`` in order and feed it to ``collector``."""
    logger.info("- find and collect exported functions...")
    for rel_path in files:
        try:
            text = (root / rel_path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ReadError(f"Cannot read source file {rel_path}: {exc}") from exc
        collector.feed(rel_path, text)
    return collector.finish()


__all__ = [
    "SIGNATURE_PATTERN",
    "OutputBuffer",
    "PackageName",
    "PackageSection",
    "SectionState",
    "SignatureCollector",
    "collect_package_funcs",
    "extract_signatures",
    "upper_first",
]
