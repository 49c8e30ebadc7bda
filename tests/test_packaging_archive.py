"""Tests for archive building and directory packaging."""

import io
import os
import tarfile
from pathlib import Path

import pytest

from pydanube.exceptions import DanubePackagingError
from pydanube.packaging import PackageResult, build_archive, package_directory


def write(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def open_archive(data: bytes) -> tarfile.TarFile:
    return tarfile.open(fileobj=io.BytesIO(data), mode="r:gz")


class TestBuildArchive:
    """Tests for build_archive."""

    def test_empty_manifest_raises(self, tmp_path):
        with pytest.raises(DanubePackagingError, match="No files to deploy"):
            build_archive(tmp_path, [])

    def test_returns_gzip_data(self, tmp_path):
        write(tmp_path / "index.html", "<h1>Hello</h1>")

        data = build_archive(tmp_path, ["index.html"])

        assert len(data) > 0
        assert data[:2] == b"\x1f\x8b"

    def test_entries_match_manifest(self, tmp_path):
        write(tmp_path / "index.html", "<h1>Hello</h1>")
        write(tmp_path / "assets" / "css" / "style.css", "body {}")
        manifest = ["assets/css/style.css", "index.html"]

        with open_archive(build_archive(tmp_path, manifest)) as tar:
            assert tar.getnames() == manifest
            assert all(member.isfile() for member in tar.getmembers())
            style = tar.extractfile("assets/css/style.css")
            assert style is not None
            assert style.read() == b"body {}"

    def test_only_manifest_files_are_packed(self, tmp_path):
        write(tmp_path / "index.html")
        write(tmp_path / "secret.txt")

        with open_archive(build_archive(tmp_path, ["index.html"])) as tar:
            assert tar.getnames() == ["index.html"]

    def test_extraction_reproduces_layout(self, tmp_path):
        source = tmp_path / "site"
        write(source / "index.html", "home")
        write(source / "blog" / "post.html", "post")
        target = tmp_path / "out"

        data = build_archive(source, ["blog/post.html", "index.html"])
        with open_archive(data) as tar:
            tar.extractall(target)

        assert (target / "index.html").read_text(encoding="utf-8") == "home"
        assert (target / "blog" / "post.html").read_text(encoding="utf-8") == "post"

    def test_does_not_modify_root(self, tmp_path):
        write(tmp_path / "index.html")
        before = sorted(os.listdir(tmp_path))

        build_archive(tmp_path, ["index.html"])

        assert sorted(os.listdir(tmp_path)) == before

    def test_uses_pax_format(self, tmp_path):
        write(tmp_path / "index.html")
        with open_archive(build_archive(tmp_path, ["index.html"])) as tar:
            assert tar.format == tarfile.PAX_FORMAT

    @pytest.mark.skipif(os.name == "nt", reason="symlinks not available")
    def test_symlinks_are_stored_as_links(self, tmp_path):
        write(tmp_path / "real.txt", "content")
        os.symlink("real.txt", tmp_path / "link.txt")
        os.symlink("missing.txt", tmp_path / "broken.txt")

        data = build_archive(tmp_path, ["broken.txt", "link.txt", "real.txt"])

        with open_archive(data) as tar:
            link = tar.getmember("link.txt")
            broken = tar.getmember("broken.txt")
            assert link.issym() and link.linkname == "real.txt"
            assert broken.issym() and broken.linkname == "missing.txt"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            build_archive(tmp_path, ["gone.html"])


class TestPackageDirectory:
    """Tests for package_directory."""

    def test_gitignore_excludes_listed_file(self, tmp_path):
        write(tmp_path / "index.html", "<h1>Hello</h1>")
        write(tmp_path / ".gitignore", "secret.txt")
        write(tmp_path / "secret.txt", "secret")

        result = package_directory(tmp_path)

        assert isinstance(result, PackageResult)
        assert sorted(result.files) == [".gitignore", "index.html"]
        assert result.file_count == 2
        assert result.size == len(result.buffer) > 0
        with open_archive(result.buffer) as tar:
            assert "secret.txt" not in tar.getnames()

    def test_gitignore_with_invalid_utf8(self, tmp_path):
        write(tmp_path / "index.html")
        write(tmp_path / "secret.txt", "secret")
        (tmp_path / ".gitignore").write_bytes(b"# caf\xe9\nsecret.txt\n")

        result = package_directory(tmp_path)

        assert sorted(result.files) == [".gitignore", "index.html"]

    def test_daubeignore(self, tmp_path):
        write(tmp_path / ".daubeignore", "*.log\n")
        write(tmp_path / "index.html")
        write(tmp_path / "debug.log")

        result = package_directory(tmp_path)

        assert sorted(result.files) == [".daubeignore", "index.html"]

    def test_extra_ignore_patterns(self, tmp_path):
        write(tmp_path / "index.html")
        write(tmp_path / "temp.bak")

        result = package_directory(tmp_path, ["*.bak"])

        assert result.files == ["index.html"]

    def test_extra_directory_pattern(self, tmp_path):
        write(tmp_path / "logs" / "app.log")
        write(tmp_path / "index.html")

        result = package_directory(tmp_path, ["logs/"])

        assert result.files == ["index.html"]

    def test_always_ignores_defaults(self, tmp_path):
        write(tmp_path / ".git" / "config")
        write(tmp_path / "node_modules" / "pkg.json", "{}")
        write(tmp_path / ".danube" / "project.json", "{}")
        write(tmp_path / "index.html")

        result = package_directory(tmp_path)

        assert result.files == ["index.html"]

    def test_nothing_to_deploy_raises(self, tmp_path):
        write(tmp_path / ".git" / "HEAD", "ref")

        with pytest.raises(DanubePackagingError, match="No files to deploy"):
            package_directory(tmp_path)

    def test_everything_ignored_raises(self, tmp_path):
        write(tmp_path / "index.html")

        with pytest.raises(DanubePackagingError):
            package_directory(tmp_path, ["*"])

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(OSError):
            package_directory(tmp_path / "missing")
