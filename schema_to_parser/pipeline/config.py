"""
Configuration for the parser generator pipeline.

Holds the module identification, naming overrides, feature gating and
output options consumed by one generation pass.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import yaml

from ..utils import RUST_KEYWORD_ESCAPE_PREFIX, RUST_RESERVED_KEYWORDS


class NamingStrategy(Protocol):
    """Pluggable naming overrides consulted before the default case conversion."""

    def resolve_type(self, module: str, raw_name: str) -> str | None: ...

    def resolve_variant(self, module: str, raw_name: str) -> str | None: ...

    def resolve_field(self, module: str, raw_name: str) -> str | None: ...


def _load_mapping_file(path: str | Path) -> dict[str, Any]:
    """Load a JSON or YAML mapping file into a dictionary."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    return data or {}


class ConfigError(ValueError):
    """Raised when a configuration dictionary holds an unusable value."""

    pass


def _load_mappings(cls, key: str, value: Any, base_dir: str | Path | None):
    """Build NameMappings/FeatureMappings from an inline dictionary or a mapping file path."""
    if isinstance(value, dict):
        return cls.from_dict(value)
    if not isinstance(value, (str, Path)):
        raise ConfigError(f"{key}: expected a mapping or a file path, got {type(value).__name__}")

    path = Path(value)
    if base_dir is not None and not path.is_absolute():
        path = Path(base_dir) / path
    try:
        return cls.from_file(path)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"{key}: cannot load {path}: {e}") from e


@dataclass
class ModuleMappings:
    """Name overrides for a single module (e.g. "sml", "wml")."""

    # Type name mappings: CT_AutoFilter -> AutoFilter
    types: dict[str, str] = field(default_factory=dict)

    # Field name mappings: r -> reference
    fields: dict[str, str] = field(default_factory=dict)

    # Enum variant mappings: customXml -> CustomXmlContent
    variants: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict[str, Any] | None) -> ModuleMappings:
        d = d or {}
        return ModuleMappings(
            types=dict(d.get("types") or {}),
            fields=dict(d.get("fields") or {}),
            variants=dict(d.get("variants") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"types": self.types, "fields": self.fields, "variants": self.variants}


@dataclass
class NameMappings:
    """Name overrides per module, with a shared fallback applied to every module."""

    shared: ModuleMappings = field(default_factory=ModuleMappings)
    modules: dict[str, ModuleMappings] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> NameMappings:
        """Create mappings from a dictionary: {"shared": {...}, "<module>": {...}}."""
        mappings = NameMappings(shared=ModuleMappings.from_dict(d.get("shared")))
        for module, module_dict in d.items():
            if module != "shared":
                mappings.modules[module] = ModuleMappings.from_dict(module_dict)
        return mappings

    @staticmethod
    def from_file(path: str | Path) -> NameMappings:
        """Load mappings from a JSON or YAML file."""
        return NameMappings.from_dict(_load_mapping_file(path))

    def to_dict(self) -> dict[str, Any]:
        result = {"shared": self.shared.to_dict()}
        for module, module_mappings in self.modules.items():
            result[module] = module_mappings.to_dict()
        return result

    def for_module(self, module: str) -> ModuleMappings:
        return self.modules.get(module, self.shared)

    def resolve_type(self, module: str, raw_name: str) -> str | None:
        """Resolve a type name, checking module-specific then shared mappings."""
        return self.for_module(module).types.get(raw_name) or self.shared.types.get(raw_name)

    def resolve_field(self, module: str, raw_name: str) -> str | None:
        """Resolve a field name, checking module-specific then shared mappings."""
        return self.for_module(module).fields.get(raw_name) or self.shared.fields.get(raw_name)

    def resolve_variant(self, module: str, raw_name: str) -> str | None:
        """Resolve a variant name, checking module-specific then shared mappings."""
        return self.for_module(module).variants.get(raw_name) or self.shared.variants.get(raw_name)


@dataclass
class FeatureMappings:
    """Feature tags used to gate generated fields behind cargo features.

    Layout: module -> element (generated type name) -> field (xml name) -> tags.
    A "*" field entry is the fallback for fields not listed explicitly, and
    the "core" tag means the field is always compiled in.
    """

    modules: dict[str, dict[str, dict[str, list[str]]]] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> FeatureMappings:
        return FeatureMappings(modules={module: dict(elements or {}) for module, elements in d.items()})

    @staticmethod
    def from_file(path: str | Path) -> FeatureMappings:
        """Load feature mappings from a JSON or YAML file."""
        return FeatureMappings.from_dict(_load_mapping_file(path))

    def to_dict(self) -> dict[str, Any]:
        return self.modules

    def get_tags(self, module: str, element: str, field_name: str) -> list[str] | None:
        elem = self.modules.get(module, {}).get(element)
        if elem is None:
            return None
        return elem.get(field_name, elem.get("*"))

    def is_core(self, module: str, element: str, field_name: str) -> bool:
        tags = self.get_tags(module, element, field_name)
        return bool(tags) and "core" in tags

    def primary_feature(self, module: str, element: str, field_name: str) -> str | None:
        """
        Get the feature gating a field.

        Returns:
            The first tag, or None when the field is core or unmapped
        """
        tags = self.get_tags(module, element, field_name)
        if not tags or "core" in tags:
            return None
        return tags[0]


@dataclass
class SchemaConventions:
    """Naming conventions of the schema definitions."""

    # Marker of complex types (w_CT_Body)
    complex_type_marker: str = "CT_"

    # Marker of simple types (s_ST_OnOff)
    simple_type_marker: str = "ST_"

    # Marker of element groups (w_EG_RunContent)
    element_group_marker: str = "EG_"

    # Datatype library whose names map to scalar types
    xsd_library: str = "xsd"

    @property
    def markers(self) -> tuple[str, ...]:
        return (self.complex_type_marker, self.simple_type_marker, self.element_group_marker)

    def is_complex_type(self, name: str) -> bool:
        return f"_{self.complex_type_marker}" in name

    def is_simple_type(self, name: str) -> bool:
        return f"_{self.simple_type_marker}" in name

    def is_element_group(self, name: str) -> bool:
        return f"_{self.element_group_marker}" in name


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters."""

    # Whether formatting is enabled
    enabled: bool = False

    # Rust edition passed to rustfmt
    edition: str = "2024"

    # Maximum line width
    max_width: int = 100


@dataclass
class CodegenConfig:
    """Configuration options for parser generation."""

    # Module name for the generated code (e.g. "sml", "wml"), used for override lookups
    module_name: str = ""

    # Naming overrides (type, variant and field names)
    name_mappings: NamingStrategy | None = None

    # Feature gating of fields
    feature_mappings: FeatureMappings | None = None

    # Log every type name that has no override
    warn_unmapped: bool = False

    # Reserved words of the target language and the prefix escaping them
    reserved_words: frozenset[str] = RUST_RESERVED_KEYWORDS
    keyword_escape_prefix: str = RUST_KEYWORD_ESCAPE_PREFIX

    # Definition naming conventions
    conventions: SchemaConventions = field(default_factory=SchemaConventions)

    # Module holding the generated types the parsers construct
    types_import: str = "super::generated::*"

    # Additional use paths for types defined in other crates
    cross_crate_imports: list[str] = field(default_factory=list)

    # Report a truncated document as an error instead of accepting it
    strict_eof: bool = False

    # Capture unknown attributes and children behind the extra-attrs/extra-children features
    preserve_unknown: bool = False

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict, base_dir: str | Path | None = None) -> CodegenConfig:
        """
        Create a config from a dictionary.

        Args:
            d: Config dictionary (as loaded from a JSON config file)
            base_dir: Directory that relative mapping file paths are resolved against

        Raises:
            ConfigError: If a mapping entry is neither a dictionary nor a file path
        """
        config = CodegenConfig()
        for k, v in d.items():
            if k == "name_mappings" and v is not None:
                config.name_mappings = _load_mappings(NameMappings, k, v, base_dir)
            elif k == "feature_mappings" and v is not None:
                config.feature_mappings = _load_mappings(FeatureMappings, k, v, base_dir)
            elif k == "reserved_words":
                config.reserved_words = frozenset(v)
            elif k == "conventions" and isinstance(v, dict):
                config.conventions = SchemaConventions(**v)
            elif k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "module_name": self.module_name,
            "name_mappings": self.name_mappings.to_dict() if isinstance(self.name_mappings, NameMappings) else None,
            "feature_mappings": self.feature_mappings.to_dict() if self.feature_mappings else None,
            "warn_unmapped": self.warn_unmapped,
            "reserved_words": sorted(self.reserved_words),
            "keyword_escape_prefix": self.keyword_escape_prefix,
            "conventions": {
                "complex_type_marker": self.conventions.complex_type_marker,
                "simple_type_marker": self.conventions.simple_type_marker,
                "element_group_marker": self.conventions.element_group_marker,
                "xsd_library": self.conventions.xsd_library,
            },
            "types_import": self.types_import,
            "cross_crate_imports": self.cross_crate_imports,
            "strict_eof": self.strict_eof,
            "preserve_unknown": self.preserve_unknown,
            "add_generation_comment": self.add_generation_comment,
            "formatter": {
                "enabled": self.formatter.enabled,
                "edition": self.formatter.edition,
                "max_width": self.formatter.max_width,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
