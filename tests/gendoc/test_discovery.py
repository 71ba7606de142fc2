"""Tests for utilkit.gendoc.discovery."""

from __future__ import annotations

import pytest

from utilkit.gendoc.discovery import discover_files, package_key
from utilkit.gendoc.errors import DiscoveryError


def test_discover_files_applies_all_filters(repo_builder) -> None:
    repo_builder.write(
        {
            "strutil/strutil.go": "package strutil\n",
            "strutil/strutil_test.go": "package strutil\n",
            "sysutil/sysutil.go": "package sysutil\n",
            "sysutil/sysutil_windows.go": "package sysutil\n",
            "sysutil/sysutil_unix.go": "package sysutil\n",
            "internal/gen.go": "package internal\n",
            "netutil/net.go": "package netutil\n",
            "main.go": "package main\n",
            "strutil/README.md": "# strutil\n",
        }
    )

    files = discover_files(
        repo_builder.path(),
        "*/*.go",
        hidden=["netutil", "numutil", "internal"],
    )

    assert files == [
        "strutil/strutil.go",
        "sysutil/sysutil.go",
        "sysutil/sysutil_unix.go",
    ]


def test_discover_files_only_scans_one_level_deep(repo_builder) -> None:
    repo_builder.write(
        {
            "fsutil/fs.go": "package fsutil\n",
            "fsutil/finder/finder.go": "package finder\n",
        }
    )

    assert discover_files(repo_builder.path(), "*/*.go") == ["fsutil/fs.go"]


def test_discover_files_accepts_custom_suffixes(repo_builder) -> None:
    repo_builder.write(
        {
            "envutil/info.go": "package envutil\n",
            "envutil/info_darwin.go": "package envutil\n",
            "envutil/info_spec.go": "package envutil\n",
        }
    )

    files = discover_files(
        repo_builder.path(),
        "*/*.go",
        test_suffixes=["_spec.go"],
        platform_suffixes=["_darwin.go", "_windows.go"],
    )

    assert files == ["envutil/info.go"]


def test_discover_files_returns_empty_list_without_matches(repo_builder) -> None:
    repo_builder.write({"docs/index.md": "# Docs\n"})

    assert discover_files(repo_builder.path(), "*/*.go") == []


@pytest.mark.parametrize("pattern", ["", "/abs/*.go"])
def test_discover_files_rejects_malformed_patterns(repo_builder, pattern: str) -> None:
    with pytest.raises(DiscoveryError):
        discover_files(repo_builder.path(), pattern)


def test_package_key_is_first_path_component() -> None:
    assert package_key("timex/timex.go") == "timex"
