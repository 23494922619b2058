"""Loading of user-supplied validator modules."""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, Optional, Union

from swagger_odm.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_validators_path(
    path: Union[str, Path], base_dir: Optional[Union[str, Path]] = None
) -> Path:
    """
    Resolve a validator module path.

    Relative paths are resolved against ``base_dir`` (the working directory if
    unset). A directory resolves to its ``__init__.py``, and a path without a
    suffix falls back to ``<path>.py``.
    """
    base = Path(base_dir) if base_dir else Path.cwd()
    resolved = (base / Path(path)).resolve()

    if resolved.is_dir():
        resolved = resolved / "__init__.py"
    elif not resolved.exists() and not resolved.suffix:
        resolved = resolved.with_suffix(".py")

    if not resolved.is_file():
        raise ConfigurationError(
            f"Validator module not found: {path}",
            details={"resolved_path": str(resolved)},
        )
    return resolved


def load_validators(
    path: Union[str, Path], base_dir: Optional[Union[str, Path]] = None
) -> Dict[str, Callable]:
    """
    Load a validator module and collect its public callables.

    Args:
        path: Module file or package directory
        base_dir: Directory relative paths are resolved against

    Returns:
        Mapping of validator name to function

    Raises:
        ConfigurationError: If the module cannot be found or executed
    """
    module_path = resolve_validators_path(path, base_dir)

    # Stable module name so repeated loads of one file share an entry
    path_hash = hashlib.sha1(str(module_path).encode("utf-8")).hexdigest()[:16]
    module_name = f"swagger_odm_validators_{module_path.stem}_{path_hash}"

    module = sys.modules.get(module_name)
    if module is None:
        module = _exec_module(module_name, module_path)

    exported = getattr(module, "__all__", None)
    names = exported if exported is not None else [
        name for name in dir(module) if not name.startswith("_")
    ]

    validators = {}
    for name in names:
        value = getattr(module, name, None)
        if not callable(value) or inspect.isclass(value) or inspect.ismodule(value):
            continue
        # Skip helpers imported from elsewhere
        if exported is None and getattr(value, "__module__", module_name) != module_name:
            continue
        validators[name] = value

    logger.info(f"Loaded {len(validators)} validators from {module_path}")
    return validators


def _exec_module(module_name: str, module_path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(module_name, str(module_path))
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot load validator module: {module_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigurationError(
            f"Failed to load validator module: {e}",
            details={"path": str(module_path)},
        )
    return module
