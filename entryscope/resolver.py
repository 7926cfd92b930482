"""Workspace, entrypoint, and bin-script resolution.

Responsibilities:
- Find the nearest workspace root (a directory holding `package.json`).
- Map a user-supplied specifier to the canonical file that will be loaded,
  following Node.js CommonJS resolution rules.
- Find a bin script in the nearest `node_modules/.bin/` that links it,
  widening outward one workspace at a time.

Every walk is an iterative ascent that stops when a directory's parent is the
directory itself. All disk access goes through the `FileSystem` capability in
`entryscope.io`.

Key types:
- `Resolver`: resolution operations bound to a config, logger and filesystem.
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
import json
import os
from pathlib import Path
from typing import Iterator

from .config import ConfigLoader, ResolverConfig
from .errors import (
    NoBinScriptError,
    NoEntrypointError,
    NoWorkspaceError,
    ResolutionError,
    ResolutionIOError,
)
from .io.filesystem import (
    DEFAULT_FILESYSTEM,
    FileSystem,
    is_executable_symlink,
    is_readable_file,
    read_text,
    real_path,
)
from .models.datatypes import DisplayPath
from .rendering import render_label, render_path
from .telemetry.logger import DiagnosticLogger, DiagnosticSink


_PATH_PREFIXES = tuple(
    {f"{os.curdir}/", f"{os.pardir}/", f"{os.curdir}{os.sep}", f"{os.pardir}{os.sep}"}
)


def _absolute(directory: str | os.PathLike[str] | None) -> Path:
    """Return `directory` (default: cwd) as a normalized absolute path."""

    if directory is None:
        return Path.cwd()
    return Path(os.path.abspath(directory))


def _join(base: Path, *parts: str) -> Path:
    """Join and lexically normalize, collapsing `..` segments."""

    return Path(os.path.normpath(os.path.join(base, *parts)))


def _is_path_like(specifier: str) -> bool:
    """Return whether `specifier` is absolute or explicitly relative."""

    return (
        os.path.isabs(specifier)
        or specifier in (os.curdir, os.pardir)
        or specifier.startswith(_PATH_PREFIXES)
    )


@contextmanager
def _request_context(
    specifier: str, from_directory: str | os.PathLike[str] | None
) -> Iterator[None]:
    """Attach the original request to resolution errors raised inside the block."""

    try:
        yield
    except ResolutionError as exc:
        exc.annotate(
            specifier=specifier,
            from_directory=from_directory if from_directory is not None else Path.cwd(),
        )
        raise


class Resolver:
    """Resolve workspaces, entrypoints and bin scripts on one filesystem."""

    def __init__(
        self,
        config: ResolverConfig | None = None,
        log: DiagnosticSink | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        """Bind conventions, diagnostics and filesystem access.

        Args:
            config: Naming conventions and display switches.
            log: Diagnostic sink; a loguru-backed `DiagnosticLogger` by default.
            fs: Filesystem capability; the host filesystem by default.
        """

        self.config = config or ResolverConfig()
        self.log: DiagnosticSink = (
            log if log is not None else DiagnosticLogger(level=self.config.log_level)
        )
        self._fs = fs or DEFAULT_FILESYSTEM

    def display_path(self, path: str | os.PathLike[str]) -> DisplayPath:
        """Render a path using this resolver's display settings."""

        return render_path(path, colorize=self.config.colorize)

    def display_label(self, name: str) -> DisplayPath:
        """Render a label using this resolver's display settings."""

        return render_label(
            name, delimiter=self.config.label_delimiter, colorize=self.config.colorize
        )

    def resolve_workspace(
        self,
        from_directory: str | os.PathLike[str] | None = None,
        *,
        fs: FileSystem | None = None,
    ) -> Path:
        """Return the nearest ancestor of `from_directory` holding a manifest.

        `from_directory` itself is checked first. The walk stops at the first
        match.

        Raises:
            NoWorkspaceError: If the filesystem root is reached without a match.
        """

        filesystem = fs or self._fs
        origin = _absolute(from_directory)
        manifest_name = self.config.manifest_name
        current = origin
        while True:
            hr_current = self.display_path(current)
            self.log.debug(f"Searching for workspace in {hr_current}")
            if is_readable_file(current / manifest_name, fs=filesystem):
                self.log.debug(f"Found workspace in {hr_current}")
                return current
            parent = current.parent
            if parent == current:
                raise NoWorkspaceError(
                    f"Could not find a workspace from {self.display_path(origin)}",
                    from_directory=from_directory if from_directory is not None else origin,
                    hint=f"A workspace is a directory containing `{manifest_name}`.",
                )
            current = parent

    def resolve_entrypoint(
        self,
        specifier: str,
        from_directory: str | os.PathLike[str] | None = None,
        *,
        fs: FileSystem | None = None,
    ) -> Path:
        """Resolve `specifier` to the canonical file Node.js would load.

        Directories resolve through the manifest `main` field, then `index`;
        missing extensions are probed in configured order. Bare names that are
        not a path under `from_directory` are looked up as installed packages
        in every ancestor `node_modules`, nearest first.

        Raises:
            NoEntrypointError: If no rule yields an existing file.
            ResolutionIOError: If a manifest cannot be read or parsed.
        """

        filesystem = fs or self._fs
        origin = _absolute(from_directory)
        with _request_context(specifier, from_directory):
            if not specifier or not specifier.strip():
                raise NoEntrypointError(
                    "Entrypoint specifier must not be empty.",
                    hint="Pass a file, directory, or package name.",
                )
            found = self._locate(specifier, origin, filesystem)
            if found is None:
                raise NoEntrypointError(
                    f"Could not resolve entrypoint `{specifier}` from {self.display_path(origin)}",
                    hint="Check the path, or pass `--bin` for an executable in "
                    f"`{self.config.dependency_dir}/{self.config.bin_dir}`.",
                )
            entrypoint = real_path(found, fs=filesystem)
        self.log.debug(
            f"Resolved entrypoint {self.display_path(found)} to {self.display_path(entrypoint)}"
        )
        return entrypoint

    def resolve_bin_script(
        self,
        name: str,
        from_directory: str | os.PathLike[str] | None = None,
        *,
        fs: FileSystem | None = None,
    ) -> Path:
        """Resolve bin script `name` to the real file its nearest link points at.

        The search starts in the workspace nearest to `from_directory` and moves
        outward one workspace at a time; a nearer link shadows farther ones.

        Raises:
            NoWorkspaceError: If `from_directory` is not inside any workspace.
            NoBinScriptError: If no workspace links an executable called `name`.
        """

        filesystem = fs or self._fs
        origin = _absolute(from_directory)
        hr_from = self.display_path(origin)
        hr_bin = self.display_label(name)
        with _request_context(name, from_directory):
            self._check_bin_name(name)
            try:
                workspace = self.resolve_workspace(origin, fs=filesystem)
            except NoWorkspaceError as exc:
                raise NoWorkspaceError(
                    f"Could not find a workspace from {hr_from}; "
                    "are you in your project directory?",
                    hint=exc.hint,
                ) from exc

            not_found = NoBinScriptError(
                f"Could not find executable {hr_bin} from {hr_from}",
                hint=f"Install the package providing `{name}` and rerun.",
            )
            current = workspace
            while True:
                bin_dir = current / self.config.dependency_dir / self.config.bin_dir
                hr_bin_dir = self.display_path(bin_dir)
                self.log.debug(f"Searching for {hr_bin} in {hr_bin_dir}")
                candidate = bin_dir / name
                if is_executable_symlink(candidate, fs=filesystem):
                    resolved = real_path(candidate, fs=filesystem)
                    self.log.debug(
                        f"Found executable {hr_bin} in {hr_bin_dir} "
                        f"linked to {self.display_path(resolved)}"
                    )
                    return resolved

                parent = current.parent
                if parent == current:
                    self.log.debug("Reached filesystem root; stopping search")
                    raise not_found
                try:
                    next_workspace = self.resolve_workspace(parent, fs=filesystem)
                except NoWorkspaceError as exc:
                    raise not_found from exc
                if next_workspace == current:
                    raise not_found
                self.log.debug(f"No such executable {hr_bin} in {hr_bin_dir}; continuing")
                current = next_workspace

    def _check_bin_name(self, name: str) -> None:
        """Reject names that would escape the link directory."""

        if (
            not name
            or name in (os.curdir, os.pardir)
            or "/" in name
            or os.sep in name
        ):
            raise NoBinScriptError(
                f"Invalid executable name `{name}`",
                hint="Pass the bare name of a script, without directories.",
            )

    def _locate(self, specifier: str, origin: Path, fs: FileSystem) -> Path | None:
        """Apply path rules, then installed-package rules for bare names."""

        directory_only = specifier.endswith(("/", os.sep))
        found = self._load_path(_join(origin, specifier), directory_only, fs)
        if found is not None or _is_path_like(specifier):
            return found
        return self._load_installed_package(specifier, origin, directory_only, fs)

    def _load_path(self, candidate: Path, directory_only: bool, fs: FileSystem) -> Path | None:
        """Try `candidate` as a file unless `directory_only`, then as a directory."""

        if not directory_only:
            found = self._load_as_file(candidate, fs)
            if found is not None:
                return found
        return self._load_as_directory(candidate, fs)

    def _load_as_file(self, candidate: Path, fs: FileSystem) -> Path | None:
        """Return `candidate` or the first `candidate<ext>` that is a readable file."""

        if is_readable_file(candidate, fs=fs):
            return candidate
        for extension in self.config.extensions:
            with_extension = Path(f"{os.fspath(candidate)}{extension}")
            if is_readable_file(with_extension, fs=fs):
                return with_extension
        return None

    def _load_index(self, directory: Path, fs: FileSystem) -> Path | None:
        """Return the first `index<ext>` file inside `directory`."""

        for extension in self.config.extensions:
            index = directory / f"index{extension}"
            if is_readable_file(index, fs=fs):
                return index
        return None

    def _load_as_directory(self, directory: Path, fs: FileSystem) -> Path | None:
        """Resolve a directory through its manifest `main` field, then `index`."""

        manifest = directory / self.config.manifest_name
        if is_readable_file(manifest, fs=fs):
            main = self._manifest_main(manifest, fs)
            if main is not None:
                target = _join(directory, main)
                found = self._load_as_file(target, fs) or self._load_index(target, fs)
                if found is not None:
                    return found
                self.log.debug(
                    f"{self.display_path(manifest)} names missing main `{main}`; trying index"
                )
        return self._load_index(directory, fs)

    def _manifest_main(self, manifest: Path, fs: FileSystem) -> str | None:
        """Return the manifest's non-empty string `main` field, if any."""

        try:
            payload = json.loads(read_text(manifest, fs=fs))
        except json.JSONDecodeError as exc:
            raise ResolutionIOError(
                f"Manifest {self.display_path(manifest)} is not valid JSON: {exc.msg}",
                stage="manifest",
            ) from exc
        if not isinstance(payload, dict):
            return None
        main = payload.get("main")
        if isinstance(main, str) and main.strip():
            return main
        return None

    def _load_installed_package(
        self, specifier: str, origin: Path, directory_only: bool, fs: FileSystem
    ) -> Path | None:
        """Look `specifier` up in each ancestor dependency directory, nearest first."""

        dependency_dir = self.config.dependency_dir
        hr_name = self.display_label(specifier)
        current = origin
        while True:
            if current.name != dependency_dir:
                lookup_dir = current / dependency_dir
                self.log.debug(f"Searching for {hr_name} in {self.display_path(lookup_dir)}")
                found = self._load_path(_join(lookup_dir, specifier), directory_only, fs)
                if found is not None:
                    return found
            parent = current.parent
            if parent == current:
                return None
            current = parent


_ENV_PREFIX = "ENTRYSCOPE_"


@lru_cache(maxsize=1)
def _resolver_for_env(env_items: tuple[tuple[str, str], ...]) -> Resolver:
    return Resolver(config=ConfigLoader.from_env(dict(env_items)))


def default_resolver() -> Resolver:
    """Return the shared resolver for the current `ENTRYSCOPE_*` environment.

    The instance is reused while those variables stay unchanged and rebuilt
    as soon as any of them is set, changed, or unset.
    """

    env_items = tuple(
        sorted((key, value) for key, value in os.environ.items() if key.startswith(_ENV_PREFIX))
    )
    return _resolver_for_env(env_items)


def resolve_workspace(
    from_directory: str | os.PathLike[str] | None = None, *, fs: FileSystem | None = None
) -> Path:
    """Resolve the nearest workspace with the default resolver."""

    return default_resolver().resolve_workspace(from_directory, fs=fs)


def resolve_entrypoint(
    specifier: str,
    from_directory: str | os.PathLike[str] | None = None,
    *,
    fs: FileSystem | None = None,
) -> Path:
    """Resolve an entrypoint with the default resolver."""

    return default_resolver().resolve_entrypoint(specifier, from_directory, fs=fs)


def resolve_bin_script(
    name: str,
    from_directory: str | os.PathLike[str] | None = None,
    *,
    fs: FileSystem | None = None,
) -> Path:
    """Resolve a bin script with the default resolver."""

    return default_resolver().resolve_bin_script(name, from_directory, fs=fs)
