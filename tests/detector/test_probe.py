"""Tests for the filesystem probe implementations and helpers."""

from pathlib import Path

from stackplan.detector.probe import (
    DirectoryProbe,
    MemoryProbe,
    ProjectProbe,
    any_dir,
    contains_ext,
    files_with_ext,
    has_any,
    mentions,
    mentions_any,
)


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class TestDirectoryProbe:
    def test_has_and_read(self, tmp_path):
        _write(tmp_path / "package.json", '{"name": "x"}')
        probe = DirectoryProbe(tmp_path)

        assert probe.has("package.json")
        assert probe.read("package.json") == '{"name": "x"}'
        assert not probe.has("missing.txt")

    def test_read_missing_file_returns_empty(self, tmp_path):
        assert DirectoryProbe(tmp_path).read("nope.txt") == ""

    def test_read_binary_file_returns_empty(self, tmp_path):
        (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\x00\x81")
        assert DirectoryProbe(tmp_path).read("blob.bin") == ""

    def test_read_directory_returns_empty(self, tmp_path):
        (tmp_path / "pages").mkdir()
        assert DirectoryProbe(tmp_path).read("pages") == ""

    def test_dir_exists(self, tmp_path):
        (tmp_path / "app" / "routes").mkdir(parents=True)
        _write(tmp_path / "manage.py")
        probe = DirectoryProbe(tmp_path)

        assert probe.dir_exists("app/routes")
        assert not probe.dir_exists("manage.py")

    def test_scan_skips_vendor_directories(self, tmp_path):
        _write(tmp_path / "src" / "index.ts")
        _write(tmp_path / "node_modules" / "lib" / "index.js")
        _write(tmp_path / ".git" / "HEAD")
        _write(tmp_path / "venv" / "lib" / "site.py")
        _write(tmp_path / "dist" / "bundle.js")

        scan = DirectoryProbe(tmp_path).scan()

        assert scan.files == ["src/index.ts"]
        assert scan.ext_counts == {".ts": 1}

    def test_scan_is_sorted_and_counts_lowercase_extensions(self, tmp_path):
        _write(tmp_path / "b.PY")
        _write(tmp_path / "a.py")
        _write(tmp_path / "Dockerfile")

        scan = DirectoryProbe(tmp_path).scan()

        assert scan.files == ["Dockerfile", "a.py", "b.PY"]
        assert scan.ext_counts == {".py": 2}

    def test_scan_is_cached(self, tmp_path):
        probe = DirectoryProbe(tmp_path)
        first = probe.scan()
        _write(tmp_path / "late.go")
        assert probe.scan() is first

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(DirectoryProbe(tmp_path), ProjectProbe)


class TestMemoryProbe:
    def test_directories_implied_by_files(self):
        probe = MemoryProbe({"src/routes/+page.svelte": "<h1/>"})

        assert probe.dir_exists("src")
        assert probe.dir_exists("src/routes")
        assert probe.has("src/routes")
        assert not probe.dir_exists("src/routes/+page.svelte")

    def test_explicit_empty_directories(self):
        probe = MemoryProbe({}, dirs=["content"])
        assert probe.dir_exists("content")

    def test_dotfiles_keep_their_names(self):
        probe = MemoryProbe({".env": "PORT=4000", "./.nvmrc": "20"})

        assert probe.read(".env") == "PORT=4000"
        assert probe.read(".nvmrc") == "20"

    def test_scan_filters_skip_dirs(self):
        probe = MemoryProbe({
            "main.go": "",
            "node_modules/x/index.js": "",
            "build/out.js": "",
        })
        assert probe.scan().files == ["main.go"]

    def test_satisfies_protocol(self):
        assert isinstance(MemoryProbe({}), ProjectProbe)


class TestHelpers:
    def test_has_any_and_any_dir(self):
        probe = MemoryProbe({"next.config.ts": "", "app/page.tsx": ""})

        assert has_any(probe, "next.config.js", "next.config.ts")
        assert not has_any(probe, "remix.config.js")
        assert any_dir(probe, "pages", "app")
        assert not any_dir(probe, "pages")

    def test_mentions_is_case_insensitive(self):
        probe = MemoryProbe({"requirements.txt": "Django==4.2\n"})

        assert mentions(probe, "requirements.txt", "django")
        assert not mentions(probe, "requirements.txt", "flask")
        assert not mentions(probe, "pyproject.toml", "django")

    def test_mentions_any(self):
        probe = MemoryProbe({"pyproject.toml": "dependencies = ['fastapi']"})
        assert mentions_any(probe, ["requirements.txt", "pyproject.toml"], "FastAPI")

    def test_extension_helpers(self):
        files = ["src/App.vue", "src/main.ts", "README.md"]

        assert contains_ext(files, ".vue")
        assert not contains_ext(files, ".rs")
        assert files_with_ext(files, ".ts") == ["src/main.ts"]
