"""Tests for template assembly, output and the full generate() run."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from utilkit.gendoc.assembly import (
    PLACEHOLDER,
    generate,
    load_template,
    render,
    template_filename,
    write_output,
)
from utilkit.gendoc.config import GendocConfig
from utilkit.gendoc.errors import ReadError, WriteError


def test_template_filename_by_language() -> None:
    allowed = ["en", "zh-CN"]
    assert template_filename("en", allowed_langs=allowed) == "README.md.tpl"
    assert template_filename("zh-CN", allowed_langs=allowed) == "README.zh-CN.md.tpl"
    assert template_filename("fr", allowed_langs=allowed) == "README.md.tpl"


def test_render_replaces_placeholder_once() -> None:
    template = f"# Title\n\n{PLACEHOLDER}\n\n## License\n"

    result = render(template, "BODY\n")

    assert result == "# Title\n\nBODY\n\n\n## License\n"


def test_render_only_replaces_first_placeholder() -> None:
    assert render(f"{PLACEHOLDER}|{PLACEHOLDER}", "x") == f"x|{PLACEHOLDER}"


def test_render_without_template_returns_body() -> None:
    assert render(None, "BODY") == "BODY"


def test_load_template_without_directory_returns_none() -> None:
    assert load_template(None, "README.md.tpl") is None


def test_load_template_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ReadError):
        load_template(tmp_path, "README.md.tpl")


def test_write_output_to_stdout_stream() -> None:
    stream = io.StringIO()

    write_output("hello\n", "stdout", stdout=stream)

    assert stream.getvalue() == "hello\n"


def test_write_output_truncates_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "README.md"
    target.write_text("a much longer previous content\n", encoding="utf-8")

    write_output("new\n", str(target))

    assert target.read_text(encoding="utf-8") == "new\n"


def test_write_output_raises_write_error(tmp_path: Path) -> None:
    with pytest.raises(WriteError):
        write_output("x", str(tmp_path / "missing" / "README.md"))


def _build_sources(repo_builder) -> None:
    repo_builder.write(
        {
            "arrutil/arrutil.go": """
                package arrutil

                func Reverse(ss []string) {
                }

                func swap(a, b int) {
                }
            """,
            "arrutil/arrutil_test.go": "func TestReverse(t *testing.T) {\n}\n",
            "timex/timex.go": "func Now() *TimeX {\n}\n",
            "internal/gendoc/main.go": "func Main() {\n}\n",
            "internal/template/README.md.tpl": f"# Kit\n\n{PLACEHOLDER}\n## License\n",
            "internal/template/README.zh-CN.md.tpl": f"# 工具\n\n{PLACEHOLDER}\n",
            "internal/template/part-array/Slice-s.md": "Array helpers.",
            "internal/template/part-timex.zh-CN.md": "时间工具",
        }
    )


def test_generate_writes_template_with_collected_body(repo_builder, tmp_path: Path) -> None:
    _build_sources(repo_builder)
    output = tmp_path / "README.md"
    config = GendocConfig(
        root=repo_builder.path(),
        output=str(output),
        base_pkg="github.com/acme/kit",
    )

    result = generate(config)

    text = output.read_text(encoding="utf-8")
    assert text == result.text
    assert text.startswith("# Kit\n\n\n### Array/Slice\n")
    assert text.endswith("```\n\n## License\n")
    assert PLACEHOLDER not in text
    assert "> Package `github.com/acme/kit/arrutil`\n\nArray helpers.\n```go\n" in text
    assert "func Reverse(ss []string)\n" in text
    assert "swap" not in text
    assert "TestReverse" not in text
    assert "Main" not in text
    assert result.files == ["arrutil/arrutil.go", "timex/timex.go"]
    assert result.packages == {
        "arrutil": "github.com/acme/kit/arrutil",
        "timex": "github.com/acme/kit/timex",
    }


def test_generate_uses_language_template_and_fragments(repo_builder) -> None:
    _build_sources(repo_builder)
    stream = io.StringIO()
    config = GendocConfig(root=repo_builder.path(), output="stdout", lang="zh-CN")

    generate(config, stdout=stream)

    text = stream.getvalue()
    assert text.startswith("# 工具\n")
    # zh-CN start fragment is missing, so the English one is used.
    assert "Array helpers.\n" in text
    assert text.endswith("func Now() *TimeX\n```\n时间工具\n\n")
    assert "> Package `repo/timex`" in text


def test_generate_without_template_dir_writes_raw_body(repo_builder) -> None:
    _build_sources(repo_builder)
    stream = io.StringIO()
    config = GendocConfig(root=repo_builder.path(), output="stdout", template_dir="")

    result = generate(config, stdout=stream)

    assert stream.getvalue() == result.text
    assert result.text.startswith("\n### Array/Slice\n")
    assert "Array helpers." not in result.text


def test_generate_missing_template_is_fatal(repo_builder) -> None:
    repo_builder.write({"timex/timex.go": "func Now() *TimeX {\n}\n"})
    config = GendocConfig(root=repo_builder.path(), output="stdout")

    with pytest.raises(ReadError):
        generate(config, stdout=io.StringIO())
