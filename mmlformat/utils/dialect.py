"""
The dialect model: which MML features are active and how they map to HTML.

A dialect is loaded from a JSON document and validated once; the resulting
Dialect object is immutable and can be shared by any number of conversions
(and pickled into worker processes).
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigError


log = logging.getLogger("mmlformat")


@dataclass(frozen=True)
class Feature:
    """A feature that is only labelled by a property (section, paragraph, ...)."""
    prop: str = ''


@dataclass(frozen=True)
class TagFormat:
    """A single tag mapped to a property (headings, dividers, charformats)."""
    tag: str
    prop: str = ''


@dataclass(frozen=True)
class PairFormat:
    """A left/right tag pair mapped to a property (paraformats, milestones)."""
    left_tag: str
    right_tag: str
    prop: str = ''


@dataclass(frozen=True)
class Dialect:
    """
    An MML dialect. A missing sub-config disables the corresponding feature.
    The order of every tuple is its match priority: the first entry wins.
    """
    section: Feature | None = None
    paragraph: Feature | None = None
    quotations: Feature | None = None
    smartquotes: bool = False
    softhyphens: bool = False
    codeblocks: tuple[Feature, ...] = ()    # index + 1 == indent level
    headings: tuple[TagFormat, ...] = ()    # index + 1 == heading level
    dividers: tuple[TagFormat, ...] = ()
    charformats: tuple[TagFormat, ...] = ()
    paraformats: tuple[PairFormat, ...] = ()
    milestones: tuple[PairFormat, ...] = ()
    name: str = ''
    description: str = ''

    def heading_for(self, marker: str) -> tuple[int, TagFormat] | None:
        """Returns (level, heading) for a heading marker character, if configured."""
        for i, heading in enumerate(self.headings):
            if heading.tag == marker:
                return i + 1, heading
        return None

    @classmethod
    def from_dict(cls, data) -> "Dialect":
        """Validates a parsed dialect document and builds a Dialect from it."""
        if not isinstance(data, dict):
            raise ConfigError(f"Dialect must be a JSON object, got {type(data).__name__}")

        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            log.warning(f"Ignoring unknown dialect keys: {', '.join(sorted(unknown))}")

        return cls(
            section=_feature(data, 'section'),
            paragraph=_feature(data, 'paragraph'),
            quotations=_feature(data, 'quotations'),
            smartquotes=_flag(data, 'smartquotes'),
            softhyphens=_flag(data, 'softhyphens'),
            codeblocks=tuple(
                _feature_entry(item, f"codeblocks[{i}]")
                for i, item in enumerate(_array(data, 'codeblocks'))
            ),
            headings=tuple(
                _heading_entry(item, f"headings[{i}]")
                for i, item in enumerate(_array(data, 'headings'))
            ),
            dividers=tuple(
                _tag_entry(item, f"dividers[{i}]")
                for i, item in enumerate(_array(data, 'dividers'))
            ),
            charformats=tuple(
                _tag_entry(item, f"charformats[{i}]")
                for i, item in enumerate(_array(data, 'charformats'))
            ),
            paraformats=tuple(
                _pair_entry(item, f"paraformats[{i}]")
                for i, item in enumerate(_array(data, 'paraformats'))
            ),
            milestones=tuple(
                _pair_entry(item, f"milestones[{i}]")
                for i, item in enumerate(_array(data, 'milestones'))
            ),
            name=_string(data, 'name', 'dialect'),
            description=_string(data, 'description', 'dialect'),
        )


_KNOWN_KEYS = {
    'section', 'paragraph', 'quotations', 'smartquotes', 'softhyphens',
    'codeblocks', 'headings', 'dividers', 'charformats', 'paraformats',
    'milestones', 'name', 'description',
}


def load_dialect(path: Path) -> Dialect:
    """Reads a JSON dialect file and validates it."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read dialect '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Dialect '{path}' is not valid JSON: {e}") from e

    dialect = Dialect.from_dict(data)
    log.info(f"Loaded dialect '{dialect.name or path.name}' from {path}")
    return dialect


# --- Validation helpers ---

def _string(obj: dict, key: str, where: str, required: bool = False) -> str:
    value = obj.get(key)
    if value is None:
        if required:
            raise ConfigError(f"{where}: missing required key '{key}'")
        return ''
    if not isinstance(value, str):
        raise ConfigError(f"{where}.{key} must be a string, got {type(value).__name__}")
    if required and not value:
        raise ConfigError(f"{where}.{key} must not be empty")
    return value


def _flag(data: dict, key: str) -> bool:
    value = data.get(key, False)
    # bool is checked explicitly; 0/1 are not accepted as flags
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def _object(value, where: str) -> dict:
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _feature(data: dict, key: str) -> Feature | None:
    if data.get(key) is None:
        return None
    return _feature_entry(data[key], key)


def _array(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be an array, got {type(value).__name__}")
    return value


def _feature_entry(item, where: str) -> Feature:
    item = _object(item, where)
    return Feature(prop=_string(item, 'prop', where))


def _heading_entry(item, where: str) -> TagFormat:
    item = _object(item, where)
    tag = _string(item, 'tag', where, required=True)
    if len(tag) != 1:
        raise ConfigError(f"{where}.tag must be a single character, got {tag!r}")
    return TagFormat(tag=tag, prop=_string(item, 'prop', where))


def _tag_entry(item, where: str) -> TagFormat:
    item = _object(item, where)
    tag = _string(item, 'tag', where, required=True)
    # Without a property the tag itself labels the element
    return TagFormat(tag=tag, prop=_string(item, 'prop', where) or tag)


def _pair_entry(item, where: str) -> PairFormat:
    item = _object(item, where)
    return PairFormat(
        left_tag=_string(item, 'leftTag', where, required=True),
        right_tag=_string(item, 'rightTag', where, required=True),
        prop=_string(item, 'prop', where),
    )
