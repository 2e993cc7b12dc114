"""GiftBank settings.

Settings live in ~/.config/giftbank.toml. A missing file is created with the
defaults on first use; a missing key falls back to its default.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict
import tomllib
import tomli_w

DEFAULT_CATEGORY_NAME = "Default for course"
DEFAULT_DB_FILENAME = "giftbank.db"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        base_dir: Root of the data, log and export directories.
        db_data_dir: Directory holding the SQLite file.
        db_filename: SQLite file name.
        log_level: Level name for file and console logging.
        log_dir: Directory for the dated log files.
        export_dir: Where `gift export` writes when no --output is given.
        export_context_prefix: Prepended to every exported $CATEGORY path,
            e.g. "$course$/top".
        default_category_name: Display name of a new bank's top category.
    """

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    export_dir: Path
    export_context_prefix: str = ""
    default_category_name: str = DEFAULT_CATEGORY_NAME

    @property
    def db_path(self) -> Path:
        return self.db_data_dir / self.db_filename

    @classmethod
    def for_base_dir(cls, base_dir: Path) -> "Config":
        """Defaults with every directory placed under base_dir."""
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename=DEFAULT_DB_FILENAME,
            log_level="INFO",
            log_dir=base_dir / "logs",
            export_dir=base_dir / "exports",
        )

    @classmethod
    def default(cls) -> "Config":
        return cls.for_base_dir(Path.home() / "data" / "giftbank")

    @classmethod
    def from_toml(cls, data: Dict[str, Any]) -> "Config":
        """Build a Config from parsed TOML, filling gaps with defaults."""
        base_dir = Path(data["base_dir"]) if "base_dir" in data else None
        config = cls.for_base_dir(base_dir) if base_dir else cls.default()

        database = data.get("database", {})
        logging_ = data.get("logging", {})
        export = data.get("export", {})
        bank = data.get("bank", {})

        config.db_data_dir = Path(database.get("data_dir", config.db_data_dir))
        config.db_filename = database.get("filename", config.db_filename)
        config.log_level = logging_.get("level", config.log_level)
        config.log_dir = Path(logging_.get("log_dir", config.log_dir))
        config.export_dir = Path(export.get("export_dir", config.export_dir))
        config.export_context_prefix = export.get("context_prefix", "")
        config.default_category_name = bank.get(
            "default_category_name", DEFAULT_CATEGORY_NAME
        )
        return config

    def to_toml(self) -> Dict[str, Any]:
        return {
            "base_dir": str(self.base_dir),
            "database": {
                "data_dir": str(self.db_data_dir),
                "filename": self.db_filename,
            },
            "logging": {
                "level": self.log_level,
                "log_dir": str(self.log_dir),
            },
            "export": {
                "export_dir": str(self.export_dir),
                "context_prefix": self.export_context_prefix,
            },
            "bank": {
                "default_category_name": self.default_category_name,
            },
        }


def get_config_path() -> Path:
    return Path.home() / ".config" / "giftbank.toml"


def get_migrations_dir() -> Path:
    """Directory of the bundled SQL migrations (next to the code, not configurable)."""
    return Path(__file__).parent / "db" / "migrations"


def get_seed_path() -> Path:
    """Bundled category seed file."""
    return Path(__file__).parent / "db" / "seed" / "categories.yaml"


def load_config() -> Config:
    """Read the config file, writing one with defaults if there is none."""
    config_path = get_config_path()

    if not config_path.exists():
        config = Config.default()
        save_config(config)
        return config

    with open(config_path, "rb") as f:
        return Config.from_toml(tomllib.load(f))


def save_config(config: Config) -> None:
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config.to_toml(), f)
