from __future__ import annotations

import hashlib
import importlib
import importlib.util
import os
import sys
from pathlib import Path

from coldstart.errors import CandidateLoadFailure
from coldstart.services.resolver import Failed, Loaded, LoadResult


SYNTHETIC_MODULE_PREFIX = "_coldstart_candidate_"


def ensure_importable(root: Path) -> None:
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


def is_file_candidate(target: str) -> bool:
    return target.endswith(".py") or "/" in target or os.sep in target


class ModuleLoader:
    """Loads candidate modules from files under ``root`` or by dotted name."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def __call__(self, target: str) -> LoadResult:
        try:
            if is_file_candidate(target):
                return self._load_file(target)
            return Loaded(target, importlib.import_module(target))
        except (Exception, SystemExit) as exc:
            return Failed(target, exc)

    def _resolve_path(self, target: str) -> Path:
        path = Path(target).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    @staticmethod
    def _module_name(path: Path) -> str:
        digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
        return f"{SYNTHETIC_MODULE_PREFIX}{path.stem}_{digest}"

    @staticmethod
    def _package_module(path: Path) -> tuple[Path, str] | None:
        """Return the import root and dotted name of a file inside a package.

        Walks up while each directory has an ``__init__.py``; files outside any
        package return ``None``.
        """
        parts = [] if path.stem == "__init__" else [path.stem]
        directory = path.parent
        while (directory / "__init__.py").is_file() and directory.name.isidentifier():
            parts.insert(0, directory.name)
            directory = directory.parent
        if len(parts) < (1 if path.stem == "__init__" else 2):
            return None
        return directory, ".".join(parts)

    def _import_package_module(self, target: str, path: Path, import_root: Path, module_name: str) -> LoadResult:
        ensure_importable(import_root)
        importlib.invalidate_caches()
        existing = set(sys.modules)
        try:
            module = importlib.import_module(module_name)
        except BaseException:
            # Drop half-imported parents so a later candidate with the same dotted name starts clean.
            prefixes = module_name.split(".")
            for depth in range(1, len(prefixes) + 1):
                name = ".".join(prefixes[:depth])
                if name not in existing:
                    sys.modules.pop(name, None)
            raise

        loaded_from = getattr(module, "__file__", None)
        if loaded_from is None or Path(loaded_from).resolve() != path:
            return Failed(
                target,
                CandidateLoadFailure(target, f"{module_name!r} resolves to {loaded_from}, not {path}"),
            )
        return Loaded(target, module)

    def _load_file(self, target: str) -> LoadResult:
        path = self._resolve_path(target)
        if not path.is_file():
            return Failed(target, CandidateLoadFailure(target, f"no module file at {path}"))

        package_module = self._package_module(path)
        if package_module is not None:
            import_root, module_name = package_module
            return self._import_package_module(target, path, import_root, module_name)

        module_name = self._module_name(path)
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            return Failed(target, CandidateLoadFailure(target, f"cannot build an import spec for {path}"))

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return Loaded(target, module)
