"""Unit tests for trust classification."""

from __future__ import annotations

from pathlib import Path

from entryscope.trust import classify_trust


def test_dependency_installed_code_is_untrusted() -> None:
    """Anything under `node_modules` is third-party."""

    classification = classify_trust("/home/user/app/node_modules/foo/index.js")

    assert classification.trusted is False
    assert classification.path == Path("/home/user/app/node_modules/foo/index.js")


def test_first_party_code_is_trusted() -> None:
    """Paths outside dependency directories are trusted by default."""

    assert classify_trust("/home/user/app/index.js").trusted is True
    assert classify_trust(Path("/home/user/app/src/node_modules_helper.js")).trusted is True


def test_dependency_dir_name_is_configurable() -> None:
    """Another install directory convention can be classified."""

    assert classify_trust("/srv/app/vendor/lib.js", dependency_dir="vendor").trusted is False
    assert classify_trust("/srv/app/node_modules/lib.js", dependency_dir="vendor").trusted is True
