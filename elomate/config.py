# elomate/config.py
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import tomllib

logger = logging.getLogger(__name__)

# Defaults (centipawns)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}

MATE_SCORE = 999_999


@dataclass
class SearchConfig:
    default_elo: int = 1500
    blunder_top_k: int = 4  # size of the pool a blunder is drawn from
    debug_purity_check: bool = False  # verify zobrist hash around every push/pop
    node_limit: Optional[int] = None  # None means search runs to completion


@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    mate_score: int = MATE_SCORE


@dataclass
class UIConfig:
    engine_name: str = "EloMate"
    engine_author: str = "EloMate developers"
    ai_color: str = "black"


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                current = getattr(target, k, None)
                if isinstance(current, dict):
                    # tables overlay the defaults instead of replacing them
                    if not isinstance(v, dict):
                        logger.warning("Config key [%s] %s must be a table, ignored", section, k)
                        continue
                    for name in v:
                        if name not in current:
                            logger.warning("Unknown config key [%s.%s] %s ignored", section, k, name)
                    current.update({name: val for name, val in v.items() if name in current})
                elif hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning("Unknown config key [%s] %s ignored", section, k)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

    def apply_env(self, environ=None) -> "Config":
        """Overlay ELOMATE_* environment variables onto this config."""
        environ = os.environ if environ is None else environ
        elo = environ.get("ELOMATE_ELO")
        if elo:
            try:
                self.search.default_elo = int(elo)
            except ValueError:
                logger.warning("Ignoring malformed ELOMATE_ELO=%r", elo)
        level = environ.get("ELOMATE_LOG_LEVEL")
        if level:
            self.log_level = level.upper()
        return self


def setup_logging(level: Optional[str] = None):
    """Configure root logging for an entry point (REST, CLI or UCI)."""
    logging.basicConfig(
        level=(level or CONFIG.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("ELOMATE_CONFIG_TOML", "config.toml")).apply_env()
