"""Hatch build hook that bundles the source revision and build date.

Wheel builds get a ``dirstamp/_build_info.json`` resource, which
``--version`` reads at runtime. Editable installs are left without it.
"""

import importlib.util
import sys
import tempfile
from pathlib import Path
from types import ModuleType
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO_MODULE = Path("src") / "dirstamp" / "core" / "build_info.py"


def load_build_info(root: Path) -> ModuleType:
    """Import ``dirstamp.core.build_info`` from the source tree.

    The package is not installed while it is being built, so the module is
    loaded straight from its file. It only needs the standard library.
    """
    name = "_dirstamp_build_info"
    spec = importlib.util.spec_from_file_location(name, root / BUILD_INFO_MODULE)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load {BUILD_INFO_MODULE} from {root}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    spec.loader.exec_module(module)
    return module


class CustomBuildHook(BuildHookInterface):
    """Write ``_build_info.json`` and force-include it in the wheel."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        if self.target_name != "wheel" or version == "editable":
            return

        build_info = load_build_info(Path(self.root))
        self._staging = tempfile.TemporaryDirectory(prefix="dirstamp-build-")
        out = build_info.write_build_info(Path(self._staging.name), source_dir=Path(self.root))
        build_data["force_include"][str(out)] = f"dirstamp/{build_info.BUILD_INFO_RESOURCE}"

    def finalize(self, version: str, build_data: dict[str, Any], artifact_path: str) -> None:
        staging = getattr(self, "_staging", None)
        if staging is not None:
            staging.cleanup()
            self._staging = None
