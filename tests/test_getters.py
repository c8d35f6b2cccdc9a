import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from srcget.core.address import file_url
from srcget.core.errors import GetterError
from srcget.core.models import Mode
from srcget.getters.file import FileGetter, local_path
from srcget.getters.git import GitGetter, parse_clone_args
from srcget.getters.hg import HgGetter
from srcget.getters.http import HttpGetter
from srcget.getters.objectstore import AzureBlobGetter, GCSGetter, S3Getter


def _ok(stdout=""):
    return MagicMock(returncode=0, stdout=stdout, stderr="")


# ── file ────────────────────────────────────────────────────────────


def test_file_getter_mode(source_tree):
    getter = FileGetter()
    assert getter.mode(file_url(str(source_tree))) is Mode.DIR
    assert getter.mode(file_url(str(source_tree / "README.md"))) is Mode.FILE
    with pytest.raises(FileNotFoundError):
        getter.mode(file_url(str(source_tree / "missing")))


def test_file_getter_copies_directory(source_tree, tmp_path):
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "stale.txt").write_text("old")

    FileGetter().get(str(dest), file_url(str(source_tree)))

    assert (dest / "pkg-1.0" / "lib" / "mod.py").read_text() == "x = 1\n"
    assert not (dest / "stale.txt").exists()


def test_file_getter_copies_single_file(source_tree, tmp_path):
    dest = tmp_path / "nested" / "README.md"
    FileGetter().get_file(str(dest), file_url(str(source_tree / "README.md")))
    assert dest.read_text() == "hello\n"


def test_file_getter_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileGetter().get(str(tmp_path / "out"), file_url(str(tmp_path / "missing")))


@pytest.mark.skipif(os.sep != "/", reason="POSIX paths")
def test_local_path_unescapes():
    assert local_path("file:///tmp/a%20b") == Path("/tmp/a b")


# ── http ────────────────────────────────────────────────────────────


def test_http_getter_downloads_file(tmp_path):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, content=b"payload")

    getter = HttpGetter(transport=httpx.MockTransport(handler))
    dest = tmp_path / "dl" / "file.zip"
    getter.get_file(str(dest), "https://example.com/file.zip?checksum=md5:abc&v=2")

    assert dest.read_bytes() == b"payload"
    assert len(seen) == 1
    assert "checksum" not in seen[0].params
    assert seen[0].params["v"] == "2"


def test_http_getter_error_status(tmp_path):
    getter = HttpGetter(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    dest = tmp_path / "file.zip"

    with pytest.raises(GetterError, match="404"):
        getter.get_file(str(dest), "https://example.com/file.zip")
    assert not dest.exists()


def test_http_getter_transport_error(tmp_path):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    getter = HttpGetter(transport=httpx.MockTransport(handler))
    with pytest.raises(GetterError, match="refused"):
        getter.get_file(str(tmp_path / "f"), "https://example.com/f")


def test_http_getter_has_no_directories(tmp_path):
    getter = HttpGetter()
    assert getter.mode("https://example.com/x") is Mode.FILE
    with pytest.raises(GetterError):
        getter.get(str(tmp_path), "https://example.com/x")


# ── object stores ───────────────────────────────────────────────────


def test_s3_native_url_maps_to_public_endpoint():
    assert S3Getter().request_url("s3://bucket/path/key.zip") == "https://bucket.s3.amazonaws.com/path/key.zip"
    assert (
        S3Getter().request_url("https://s3.amazonaws.com/bucket/key.zip")
        == "https://s3.amazonaws.com/bucket/key.zip"
    )


def test_gcs_json_api_url_maps_to_public_endpoint():
    getter = GCSGetter()
    assert (
        getter.request_url("https://www.googleapis.com/storage/v1/bucket/foo/bar.zip")
        == "https://storage.googleapis.com/bucket/foo/bar.zip"
    )
    assert getter.request_url("gcs://bucket/obj") == "https://storage.googleapis.com/bucket/obj"


def test_azure_native_scheme_needs_https():
    with pytest.raises(GetterError):
        AzureBlobGetter().request_url("azureblob://container/blob")


def test_object_store_detect_strips_force_token():
    assert S3Getter().detect("bucket.s3.amazonaws.com/key") == ("https://s3.amazonaws.com/bucket/key", True)
    assert S3Getter().detect("https://s3.amazonaws.com/bucket/key") == ("", False)


def test_s3_getter_downloads(tmp_path):
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, content=b"object")

    getter = S3Getter(transport=httpx.MockTransport(handler))
    dest = tmp_path / "key.zip"
    getter.get_file(str(dest), "s3://bucket/key.zip")

    assert dest.read_bytes() == b"object"
    assert seen == ["https://bucket.s3.amazonaws.com/key.zip"]


# ── git ─────────────────────────────────────────────────────────────


def test_parse_clone_args():
    assert parse_clone_args("https://example.com/r.git?ref=v1&depth=1&foo=bar") == (
        "https://example.com/r.git?foo=bar",
        "v1",
        1,
    )
    assert parse_clone_args("ssh://git@example.com/r.git") == ("ssh://git@example.com/r.git", "", None)


@pytest.mark.parametrize("depth", ["abc", "0"])
def test_parse_clone_args_bad_depth(depth):
    with pytest.raises(GetterError, match="depth"):
        parse_clone_args(f"https://example.com/r.git?depth={depth}")


@patch("srcget.getters.git._run")
@patch("srcget.getters.git.shutil.which", return_value="/usr/bin/git")
def test_git_clone_then_checkout_ref(mock_which, mock_run, tmp_path):
    mock_run.return_value = _ok()
    dest = str(tmp_path / "repo")

    GitGetter().get(dest, "https://example.com/r.git?ref=v1.2.3")

    assert mock_run.call_args_list[0].args[0] == ["git", "clone", "https://example.com/r.git", dest]
    assert mock_run.call_args_list[1].args[0] == ["git", "-C", dest, "checkout", "v1.2.3"]


@patch("srcget.getters.git._run")
@patch("srcget.getters.git.shutil.which", return_value="/usr/bin/git")
def test_git_shallow_clone_of_branch(mock_which, mock_run, tmp_path):
    mock_run.return_value = _ok()
    dest = str(tmp_path / "repo")

    GitGetter(depth=1).get(dest, "https://example.com/r.git?ref=main")

    mock_run.assert_called_once_with(
        ["git", "clone", "--depth", "1", "--branch", "main", "https://example.com/r.git", dest]
    )


@patch("srcget.getters.git._run")
@patch("srcget.getters.git.shutil.which", return_value="/usr/bin/git")
def test_git_clone_failure(mock_which, mock_run, tmp_path):
    mock_run.return_value = MagicMock(returncode=128, stdout="", stderr="fatal: not found\n")

    with pytest.raises(GetterError, match="fatal: not found"):
        GitGetter().get(str(tmp_path / "repo"), "https://example.com/r.git")


@patch("srcget.getters.git.shutil.which", return_value=None)
def test_git_missing_binary(mock_which, tmp_path):
    with pytest.raises(GetterError, match="PATH"):
        GitGetter().get(str(tmp_path / "repo"), "https://example.com/r.git")


def test_git_getter_claims_and_modes():
    getter = GitGetter()
    assert getter.mode("https://example.com/r.git") is Mode.DIR
    assert getter.claims("https://example.com/r.git")
    assert getter.claims("https://bitbucket.org/o/r")
    assert not getter.claims("https://example.com/file.zip")
    with pytest.raises(GetterError):
        getter.get_file("/tmp/x", "https://example.com/r.git")


# ── hg ──────────────────────────────────────────────────────────────


@patch("srcget.getters.hg._run")
@patch("srcget.getters.hg.shutil.which", return_value="/usr/bin/hg")
def test_hg_clone_and_update(mock_which, mock_run, tmp_path):
    mock_run.return_value = _ok()
    dest = str(tmp_path / "repo")

    HgGetter().get(dest, "https://bitbucket.org/o/r?rev=abc123")

    assert mock_run.call_args_list[0].args[0] == ["hg", "clone", "-U", "--", "https://bitbucket.org/o/r", dest]
    assert mock_run.call_args_list[1].args[0] == ["hg", "update", "-R", dest, "-r", "abc123"]


def test_hg_getter_claims_only_non_git_bitbucket():
    getter = HgGetter()
    assert getter.claims("https://bitbucket.org/o/r")
    assert not getter.claims("https://bitbucket.org/o/r.git")
    assert getter.detect("bitbucket.org/o/r") == ("https://bitbucket.org/o/r", True)
    assert getter.detect("bitbucket.org/o/r.git") == ("", False)
