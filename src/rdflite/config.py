"""
Configuration for rdflite environments, readers and writers.

Provides:
- Dataclass configuration sections with dict round-tripping
- Validation
- Loading and saving as YAML or JSON
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from rdflite.errors import RDFLiteError

logger = logging.getLogger(__name__)


ID_STRATEGIES = ("uuid", "counter")


class ConfigValidationError(RDFLiteError, ValueError):
    """Configuration validation error."""
    pass


@dataclass
class EnvironmentConfig:
    """Prefixes, terms and id generation of an RDFEnvironment."""
    include_common_prefixes: bool = True
    prefixes: Dict[str, str] = field(default_factory=dict)
    terms: Dict[str, str] = field(default_factory=dict)
    default_prefix: Optional[str] = None
    default_vocabulary: Optional[str] = None
    id_strategy: str = "uuid"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "include_common_prefixes": self.include_common_prefixes,
            "prefixes": dict(self.prefixes),
            "terms": dict(self.terms),
            "default_prefix": self.default_prefix,
            "default_vocabulary": self.default_vocabulary,
            "id_strategy": self.id_strategy,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnvironmentConfig":
        return cls(
            include_common_prefixes=data.get("include_common_prefixes", True),
            prefixes=dict(data.get("prefixes") or {}),
            terms=dict(data.get("terms") or {}),
            default_prefix=data.get("default_prefix"),
            default_vocabulary=data.get("default_vocabulary"),
            id_strategy=data.get("id_strategy", "uuid"),
        )


@dataclass
class ReaderConfig:
    """Turtle reader configuration."""
    base_iri: str = ""
    max_workers: int = 1
    blank_node_prefix: str = "genid"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_iri": self.base_iri,
            "max_workers": self.max_workers,
            "blank_node_prefix": self.blank_node_prefix,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReaderConfig":
        return cls(
            base_iri=data.get("base_iri", ""),
            max_workers=data.get("max_workers", 1),
            blank_node_prefix=data.get("blank_node_prefix", "genid"),
        )


@dataclass
class WriterConfig:
    """Turtle writer configuration."""
    indent: int = 4
    use_prefixes: bool = True
    only_used_prefixes: bool = True
    abbreviate_literals: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "indent": self.indent,
            "use_prefixes": self.use_prefixes,
            "only_used_prefixes": self.only_used_prefixes,
            "abbreviate_literals": self.abbreviate_literals,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WriterConfig":
        return cls(
            indent=data.get("indent", 4),
            use_prefixes=data.get("use_prefixes", True),
            only_used_prefixes=data.get("only_used_prefixes", True),
            abbreviate_literals=data.get("abbreviate_literals", True),
        )


@dataclass
class RDFLiteConfig:
    """Complete configuration."""
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    writer: WriterConfig = field(default_factory=WriterConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment.to_dict(),
            "reader": self.reader.to_dict(),
            "writer": self.writer.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RDFLiteConfig":
        return cls(
            environment=EnvironmentConfig.from_dict(data.get("environment") or {}),
            reader=ReaderConfig.from_dict(data.get("reader") or {}),
            writer=WriterConfig.from_dict(data.get("writer") or {}),
        )


class ConfigValidator:
    """Validates rdflite configuration."""

    @staticmethod
    def validate(config: RDFLiteConfig) -> List[str]:
        """
        Validate configuration.

        Returns list of error messages (empty if valid).
        """
        errors = []

        env = config.environment
        if env.id_strategy not in ID_STRATEGIES:
            errors.append(f"Invalid id_strategy: {env.id_strategy}")

        for prefix, iri in env.prefixes.items():
            if ":" in prefix or any(ch.isspace() for ch in prefix):
                errors.append(f"Invalid prefix: {prefix!r}")
            if not isinstance(iri, str) or not iri:
                errors.append(f"Prefix {prefix!r} must map to a non-empty IRI")

        for term, iri in env.terms.items():
            if ":" in term or any(ch.isspace() for ch in term):
                errors.append(f"Invalid term: {term!r}")
            if not isinstance(iri, str) or not iri:
                errors.append(f"Term {term!r} must map to a non-empty IRI")

        if config.reader.max_workers < 1:
            errors.append("max_workers must be at least 1")

        if not config.reader.blank_node_prefix:
            errors.append("blank_node_prefix must not be empty")

        if config.writer.indent < 0:
            errors.append("indent cannot be negative")

        return errors

    @staticmethod
    def validate_or_raise(config: RDFLiteConfig) -> None:
        """Validate configuration, raising on errors."""
        errors = ConfigValidator.validate(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))


def load_config(path: Union[str, Path], validate: bool = True) -> RDFLiteConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: File ending in .yaml, .yml or .json
        validate: Raise ConfigValidationError on invalid settings

    Returns:
        The loaded configuration; missing sections use defaults
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")

    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    elif path.suffix == ".json":
        data = json.loads(text) if text.strip() else {}
    else:
        raise ConfigValidationError(f"Unsupported config format: {path.suffix}")

    if not isinstance(data, dict):
        raise ConfigValidationError(f"Config root must be a mapping: {path}")

    config = RDFLiteConfig.from_dict(data)
    if validate:
        ConfigValidator.validate_or_raise(config)

    logger.info(f"Loaded configuration from {path}")
    return config


def save_config(config: RDFLiteConfig, path: Union[str, Path]) -> None:
    """Write configuration as YAML or JSON depending on the file suffix."""
    path = Path(path)
    data = config.to_dict()

    if path.suffix in (".yaml", ".yml"):
        text = yaml.safe_dump(data, sort_keys=False)
    elif path.suffix == ".json":
        text = json.dumps(data, indent=2)
    else:
        raise ConfigValidationError(f"Unsupported config format: {path.suffix}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
