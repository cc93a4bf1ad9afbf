# -*- coding: utf-8 -*-
"""Configuration management for the MCDM engine."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional, Any
from enum import Enum
import json

from .exceptions import ConfigurationError
from .mcdm.preference import PreferenceType


class MethodType(Enum):
    """Supported decision methods."""
    PROMETHEE = "promethee"
    AHP = "ahp"
    ELECTRE = "electre"


@dataclass
class PathConfig:
    """File and directory paths configuration."""
    base_dir: Path = field(default_factory=lambda: Path.cwd())
    output_name: str = "outputs"

    @property
    def output_dir(self) -> Path:
        return Path(self.base_dir) / self.output_name

    @property
    def results_dir(self) -> Path:
        return self.output_dir / "results"

    @property
    def logs_dir(self) -> Path:
        return self.output_dir / "logs"

    def ensure_directories(self) -> None:
        """Create all necessary directories."""
        for d in [self.output_dir, self.results_dir, self.logs_dir]:
            d.mkdir(parents=True, exist_ok=True)


@dataclass
class ValidationConfig:
    """Input validation tolerances."""
    weight_tolerance: float = 0.01
    reciprocal_tolerance: float = 1e-2


@dataclass
class PROMETHEEConfig:
    """PROMETHEE II configuration."""
    default_preference: PreferenceType = PreferenceType.USUAL
    default_threshold: float = 0.0


@dataclass
class AHPConfig:
    """AHP configuration."""
    cr_acceptance: float = 0.1


@dataclass
class ELECTREConfig:
    """ELECTRE I configuration."""
    concordance_threshold: float = 0.7
    discordance_threshold: float = 0.3


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console: bool = True
    use_colors: bool = False
    log_file: Optional[str] = None
    json_file: Optional[str] = None


@dataclass
class OutputConfig:
    """Result export configuration."""
    json_indent: int = 2
    csv_float_format: str = "%.6f"
    save_csv: bool = True


_SECTIONS = {
    'paths': PathConfig,
    'validation': ValidationConfig,
    'promethee': PROMETHEEConfig,
    'ahp': AHPConfig,
    'electre': ELECTREConfig,
    'logging': LoggingConfig,
    'output': OutputConfig,
}


@dataclass
class Config:
    """Master configuration combining all sub-configurations."""
    paths: PathConfig = field(default_factory=PathConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    promethee: PROMETHEEConfig = field(default_factory=PROMETHEEConfig)
    ahp: AHPConfig = field(default_factory=AHPConfig)
    electre: ELECTREConfig = field(default_factory=ELECTREConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def output_dir(self) -> str:
        """Get output directory path as string."""
        return str(self.paths.output_dir)

    def to_dict(self) -> Dict:
        def _to_dict(obj):
            if hasattr(obj, '__dataclass_fields__'):
                return {k: _to_dict(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, list):
                return [_to_dict(i) for i in obj]
            elif isinstance(obj, dict):
                return {k: _to_dict(v) for k, v in obj.items()}
            return obj
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Build a configuration from a (possibly partial) nested dict."""
        sections = {}
        for name, section_cls in _SECTIONS.items():
            values = dict(data.get(name, {}))
            known = {f.name for f in fields(section_cls)}
            unknown = set(values) - known
            if unknown:
                raise ConfigurationError(f"Unknown {name} settings: {sorted(unknown)}")
            if section_cls is PathConfig and 'base_dir' in values:
                values['base_dir'] = Path(values['base_dir'])
            if section_cls is PROMETHEEConfig and 'default_preference' in values:
                values['default_preference'] = PreferenceType.parse(
                    values['default_preference'])
            sections[name] = section_cls(**values)
        return cls(**sections)

    def save(self, filepath: Path) -> None:
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path) -> 'Config':
        with open(filepath, 'r') as f:
            return cls.from_dict(json.load(f))

    def summary(self) -> str:
        return f"""
{'='*60}
CONFIGURATION SUMMARY - MCDM Engine
{'='*60}

VALIDATION:
  Weight sum tolerance: {self.validation.weight_tolerance}
  Reciprocal tolerance: {self.validation.reciprocal_tolerance}

PROMETHEE II:
  Default preference: {self.promethee.default_preference.value}
  Default threshold: {self.promethee.default_threshold}

AHP:
  CR acceptance: {self.ahp.cr_acceptance}

ELECTRE I:
  Concordance threshold: {self.electre.concordance_threshold}
  Discordance threshold: {self.electre.discordance_threshold}

OUTPUT:
  Directory: {self.output_dir}
  CSV export: {self.output.save_csv}
{'='*60}
"""


_config: Optional[Config] = None

def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config()
    return _config

def get_default_config() -> Config:
    """Get a fresh default configuration."""
    return Config()

def set_config(config: Config) -> None:
    global _config
    _config = config

def reset_config() -> None:
    global _config
    _config = Config()
