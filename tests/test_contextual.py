import pytest

from srcget.core.errors import AddressParseError, ForcedDetectionError, InvalidSourceError
from srcget.detectors import ctx_resolve, default_ctx_detectors
from srcget.detectors.contextual import (
    ContextualAdapter,
    GitCtxDetector,
    detect_git_force_filepath,
    is_relative_path,
)
from srcget.detectors.github import GitHubDetector


def test_git_relative_path_two_levels_up():
    result = GitCtxDetector().ctx_detect(
        "../../some-grandparent-dir?ref=v1.2.3",
        "/some/caller/abs/path",
        force_token="git",
        src_resolve_from="",
    )
    assert result == ("git::file:///some/caller/some-grandparent-dir?ref=v1.2.3", True)


def test_git_relative_path_through_chain():
    assert (
        ctx_resolve("git::../../some-grandparent-dir?ref=v1.2.3", pwd="/some/caller/abs/path")
        == "git::file:///some/caller/some-grandparent-dir?ref=v1.2.3"
    )


def test_src_resolve_from_takes_precedence_over_pwd():
    assert (
        ctx_resolve("git::./mod", pwd="/pwd", src_resolve_from="/caller/dir")
        == "git::file:///caller/dir/mod"
    )


def test_git_relative_path_keeps_subdir_and_query():
    assert (
        ctx_resolve("git::../repo//modules/vpc?ref=v1", pwd="/work/root")
        == "git::file:///work/repo//modules/vpc?ref=v1"
    )


def test_git_relative_path_is_percent_encoded():
    assert ctx_resolve("git::./my repo", pwd="/pwd") == "git::file:///pwd/my%20repo"


@pytest.mark.parametrize("path, expected", [(".", "git::file:///pwd"), ("..", "git::file:///")])
def test_git_dot_paths(path, expected):
    assert ctx_resolve(f"git::{path}", pwd="/pwd") == expected


def test_git_relative_path_without_anchor_raises():
    with pytest.raises(ForcedDetectionError) as exc_info:
        ctx_resolve("git::./foo")
    assert exc_info.value.force == "git"


def test_git_relative_path_with_relative_anchor_raises():
    with pytest.raises(ForcedDetectionError, match="non-absolute"):
        ctx_resolve("git::./foo", pwd="relative/dir")


def test_git_absolute_path_falls_through_to_file():
    assert ctx_resolve("git::/abs/repo", pwd="/pwd") == "git::file:///abs/repo"


def test_relative_path_without_git_token_is_plain_file():
    assert ctx_resolve("./foo", pwd="/pwd") == "file:///pwd/foo"


def test_file_detector_honours_src_resolve_from():
    assert ctx_resolve("./foo", pwd="/pwd", src_resolve_from="/module") == "file:///module/foo"


def test_scp_style_still_detected():
    assert (
        ctx_resolve("git@github.com:hashicorp/foo.git", pwd="/pwd")
        == "git::ssh://git@github.com/hashicorp/foo.git"
    )


def test_github_shorthand_through_contextual_chain():
    assert ctx_resolve("github.com/hashicorp/foo", pwd="/pwd") == "git::https://github.com/hashicorp/foo.git"


def test_canonical_input_unchanged():
    src = "git::https://example.com/r.git//sub?ref=v1"
    assert ctx_resolve(src, pwd="/pwd") == src


def test_malformed_url_is_a_parse_error():
    with pytest.raises(AddressParseError):
        ctx_resolve("git::https://example.com/%zz", pwd="/pwd")


def test_no_match_with_force_token_names_the_token():
    with pytest.raises(ForcedDetectionError, match="'git'"):
        ctx_resolve("git::./foo", pwd="/pwd", detectors=())


def test_no_match_without_force_token():
    with pytest.raises(InvalidSourceError):
        ctx_resolve("./foo", pwd="/pwd", detectors=())


def test_git_force_filepath_declines_other_shapes():
    assert detect_git_force_filepath("./foo", "/pwd", "hg") == ("", False)
    assert detect_git_force_filepath("dir/child", "/pwd", "git") == ("", False)
    assert detect_git_force_filepath("/abs", "/pwd", "git") == ("", False)


@pytest.mark.parametrize(
    "path, expected",
    [
        (".", True),
        ("..", True),
        ("./x", True),
        ("../x", True),
        (".\\x", True),
        ("..\\x", True),
        ("dir/child", False),
        ("/abs", False),
        (".hidden", False),
        ("", False),
    ],
)
def test_is_relative_path(path, expected):
    assert is_relative_path(path) is expected


def test_adapter_delegates_to_plain_detector():
    adapter = ContextualAdapter(GitHubDetector())
    assert adapter.name == "github"
    assert adapter.ctx_detect("github.com/a/b", "/pwd", force_token="x") == (
        "git::https://github.com/a/b.git",
        True,
    )


def test_default_ctx_chain_mirrors_plain_chain():
    names = [d.name for d in default_ctx_detectors()]
    assert names == ["github", "gitlab", "git", "bitbucket", "s3", "gcs", "azureblob", "oss", "file"]
