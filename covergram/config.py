"""
Configuration for the covering grammar construction.

Defines CoverSettings, a frozen dataclass with the knobs the pipeline reads:
which letters name the insertion helper nonterminals and how loud the demo
entry point logs.

Precedence when loading: environment > TOML > defaults.

- Environment: COVERGRAM_INSERTION_SYMBOLS (two uppercase letters, e.g. "HI"),
  COVERGRAM_LOG_LEVEL (a logging level name).
- TOML: ./covergram.toml, either a [cover] table or top-level keys, or
  [tool.covergram] in ./pyproject.toml.

Examples:
    >>> from covergram.config import CoverSettings
    >>> CoverSettings().insertion_symbols
    ('H', 'I')
"""

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Self

from covergram.errors import ConfigError
from covergram.production import is_nonterminal_symbol

log = logging.getLogger(__name__)

DEFAULT_INSERTION_SYMBOLS = ("H", "I")
LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class CoverSettings:
    """
    Runtime settings for covering grammar construction.

    Attributes:
        insertion_symbols (tuple[str, str]): Preferred names of the helper
            nonterminals `H` (a run of inserted terminals) and `I` (one
            inserted terminal). A name already used by the input grammar is
            swapped for a free uppercase letter.
        log_level (str): Level used by `configure_logging` in the demo.
    """

    insertion_symbols: tuple[str, str] = DEFAULT_INSERTION_SYMBOLS
    log_level: str = "WARNING"

    def __post_init__(self):
        try:
            symbols = tuple(self.insertion_symbols)
        except TypeError as e:
            raise ConfigError(f"insertion_symbols must be two uppercase letters, got {self.insertion_symbols!r}") from e
        if len(symbols) != 2 or not all(is_nonterminal_symbol(s) for s in symbols):
            raise ConfigError(f"insertion_symbols must be two uppercase letters, got {self.insertion_symbols!r}")
        if symbols[0] == symbols[1]:
            raise ConfigError(f"insertion_symbols must differ, got {self.insertion_symbols!r}")
        object.__setattr__(self, "insertion_symbols", symbols)

        level = str(self.log_level).strip().upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level {self.log_level!r}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def _apply_mapping(cls, base: Self, cfg: dict[str, Any] | None) -> Self:
        """Apply a loose config mapping onto CoverSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base
        if "insertion_symbols" in cfg:
            s = replace(s, insertion_symbols=cfg["insertion_symbols"])
        if "log_level" in cfg:
            s = replace(s, log_level=cfg["log_level"])
        return s

    @classmethod
    def from_env(cls, base: Self | None = None, prefix: str = "COVERGRAM_") -> Self:
        s = base or cls()

        mapping: dict[str, Any] = {}
        v = os.getenv(prefix + "INSERTION_SYMBOLS")
        if v:
            mapping["insertion_symbols"] = v.strip()
        v = os.getenv(prefix + "LOG_LEVEL")
        if v:
            mapping["log_level"] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> Self:
        """
        Build CoverSettings from a TOML file.

        Search order when `path` is None:
            1) ./covergram.toml (with either a [cover] table or top-level keys)
            2) ./pyproject.toml under [tool.covergram]

        Returns defaults if no file is present.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "covergram.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            with p.open("rb") as fh:
                try:
                    data = tomllib.load(fh)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"Cannot parse {p}: {e}") from e

            if p.name == "pyproject.toml":
                cfg = data.get("tool", {}).get("covergram")
            elif isinstance(data.get("cover"), dict):
                cfg = data["cover"]
            else:
                cfg = data

            if cfg:
                log.debug("Loaded settings from %s", p)
                return cls._apply_mapping(s, cfg)

        return s

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> Self:
        """Load CoverSettings applying precedence: environment > TOML > defaults."""
        s = cls.from_toml(path)
        return cls.from_env(base=s)
