"""TOML configuration file parsing

Expected layout:

    [server]
    address = "0.0.0.0"
    port = 8080

    [security]
    privateKey = "/usr/share/pruefungsplaner-auth/keys/private_key.pem"
    publicKey = "/usr/share/pruefungsplaner-auth/keys/public_key.pem"

    [[user]]
    username = "admin"
    password = "secret"
    claims = ["admin", "planner"]

Every key is optional except username and password inside a user table.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from pruefungsplaner_auth.exceptions import ConfigFileError
from pruefungsplaner_auth.models import User
from pruefungsplaner_auth.settings import StartupSettings

_MAX_PORT = 65535


@dataclass(frozen=True)
class ConfigFileValues:
    """Values read from one configuration file, with defaults applied"""

    path: Path
    address: str
    port: int
    private_key_path: Path
    public_key_path: Path
    users: List[User] = field(default_factory=list)


def load_config_file(path: Path, settings: StartupSettings) -> ConfigFileValues:
    """
    Parse a TOML configuration file

    Args:
        path: File to read; os.devnull yields an all-defaults result
        settings: Supplies default address, port and key paths

    Returns:
        ConfigFileValues

    Raises:
        ConfigFileError: If the file cannot be read, is not valid TOML, holds
                         values of the wrong type or a user table lacks
                         username or password
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            document = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigFileError(f"Parsing error in {path} :\n{e}", {"file": str(path)})
    except UnicodeDecodeError as e:
        raise ConfigFileError(f"Parsing error in {path} :\n{e}", {"file": str(path)})
    except OSError as e:
        raise ConfigFileError(
            f"Configuration file {path} cannot be read: {e.strerror or e}", {"file": str(path)}
        )

    server = _table(document, "server", path)
    security = _table(document, "security", path)

    address = _string(server, "address", "server.address", path, settings.default_address)
    port = _port(server, path, settings.default_port)
    private_key = _string(
        security, "privateKey", "security.privateKey", path, str(settings.private_key_path)
    )
    public_key = _string(
        security, "publicKey", "security.publicKey", path, str(settings.public_key_path)
    )

    return ConfigFileValues(
        path=path,
        address=address,
        port=port,
        private_key_path=Path(private_key),
        public_key_path=Path(public_key),
        users=_users(document, path),
    )


def _table(document: Dict[str, Any], key: str, path: Path) -> Dict[str, Any]:
    value = document.get(key, {})
    if not isinstance(value, dict):
        raise ConfigFileError(f"{key} in configuration file {path} must be a table.")
    return value


def _string(table: Dict[str, Any], key: str, qualified: str, path: Path, default: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ConfigFileError(f"{qualified} in configuration file {path} must be a string.")
    return value


def _port(server: Dict[str, Any], path: Path, default: int) -> int:
    value = server.get("port", default)
    # bool is an int subclass in Python but not a TOML integer
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _MAX_PORT:
        raise ConfigFileError(
            f"server.port in configuration file {path} must be an integer between 0 and {_MAX_PORT}."
        )
    return value


def _users(document: Dict[str, Any], path: Path) -> List[User]:
    tables = document.get("user", [])
    if not isinstance(tables, list) or not all(isinstance(t, dict) for t in tables):
        raise ConfigFileError(f"user in configuration file {path} must be an array of tables.")

    users: List[User] = []
    for table in tables:
        username = _optional_string(table, "username")
        if username is None:
            raise ConfigFileError(f"Missing username in configuration file {path}.")

        password = _optional_string(table, "password")
        if password is None:
            raise ConfigFileError(
                f"Missing password for user {username} in configuration file {path}."
            )

        claims = table.get("claims", [])
        if not isinstance(claims, list) or not all(isinstance(c, str) for c in claims):
            raise ConfigFileError(
                f"Claims of user {username} in configuration file {path} must be a list of strings."
            )

        users.append(User(name=username, password_record=password, claims=tuple(claims)))
    return users


def _optional_string(table: Dict[str, Any], key: str) -> Optional[str]:
    value = table.get(key)
    return value if isinstance(value, str) else None
