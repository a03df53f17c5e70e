import json
import logging
from pathlib import Path
from importlib import resources as res

from ..utils.dialect import Dialect
from ..utils.exceptions import ConfigError


log = logging.getLogger("mmlformat")


DIALECTS_PACKAGE = "mmlformat.resources.dialects"
CSS_PACKAGE = "mmlformat.resources.css"

DEFAULT_DIALECT = "default.json"
DEFAULT_CSS = "default.css"


def _resource_path(package: str, filename: str) -> Path | None:
    """Return a real filesystem path for a resource using importlib.resources."""
    try:
        resource = res.files(package).joinpath(filename)
        with res.as_file(resource) as path:
            return path
    except (ModuleNotFoundError, OSError) as e:
        log.error(f"Resource not found: {package}/{filename}: {e}")
        return None


def load_text(package: str, filename: str) -> str | None:
    """Return file content as text."""
    path = _resource_path(package, filename)
    if not path or not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def load_json(package: str, filename: str) -> dict:
    """Load JSON from resources folder."""
    path = _resource_path(package, filename)
    if not path or not path.is_file():
        log.error(f"JSON not found: {package}/{filename}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.error(f"Failed to load JSON {filename}: {e}")
        return {}


def load_default_dialect() -> Dialect:
    """The dialect bundled with the package. Raises ConfigError if it is missing."""
    data = load_json(DIALECTS_PACKAGE, DEFAULT_DIALECT)
    if not data:
        raise ConfigError(f"Bundled dialect could not be loaded: {DIALECTS_PACKAGE}/{DEFAULT_DIALECT}")
    return Dialect.from_dict(data)


def load_default_css() -> str:
    """The stylesheet embedded in standalone documents when no other is linked."""
    return load_text(CSS_PACKAGE, DEFAULT_CSS) or ""
