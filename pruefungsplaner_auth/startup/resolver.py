"""Startup configuration resolution

Combines command line flags, the TOML configuration file and installation
defaults into one validated Configuration.

Priority chain for every field:
    1. Command line flag
    2. Configuration file
    3. Installation default (StartupSettings)

The key pair is resolved as a unit: when both --private-key and --public-key
are given, the key paths in the configuration file are never consulted.
"""

import argparse
import ipaddress
import logging
from pathlib import Path
from typing import Optional, Sequence

from pruefungsplaner_auth import __version__
from pruefungsplaner_auth.config_file import load_config_file
from pruefungsplaner_auth.exceptions import ConfigurationError
from pruefungsplaner_auth.keys import KeyMaterialManager, create_key_backend
from pruefungsplaner_auth.logger import ConsoleLogger, Logger
from pruefungsplaner_auth.models import Configuration, KeyPair
from pruefungsplaner_auth.settings import StartupSettings
from pruefungsplaner_auth.users import UserRegistry

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    """Command line interface of the authentication server"""
    parser = argparse.ArgumentParser(
        prog="pruefungsplaner-auth",
        description="Pruefungsplaner authentication server",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        metavar="config",
        default=None,
        help="Load configuration from <config>.",
    )
    parser.add_argument(
        "-p",
        "--port",
        metavar="port",
        default=None,
        help="The server will listen on port <port>",
    )
    parser.add_argument(
        "-a",
        "--address",
        metavar="address",
        default=None,
        help="The server will listen on address <address>",
    )
    parser.add_argument(
        "--private-key",
        metavar="privatekey",
        default=None,
        help="The private RSA256 key file in .pem format",
    )
    parser.add_argument(
        "--public-key",
        metavar="publickey",
        default=None,
        help="The public RSA256 key file in .pem format",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level for startup messages (default: INFO)",
    )
    return parser


def parse_port(value: str) -> int:
    """
    Parse a port given on the command line

    Raises:
        ConfigurationError: If the value is not an unsigned integer in 1-65535
    """
    if not value.isascii() or not value.isdigit():
        raise ConfigurationError(f"Port {value} is not a number.")
    port = int(value)
    if not 0 < port <= 65535:
        raise ConfigurationError(f"Port {value} is out of range (1-65535).")
    return port


def is_valid_address(address: str) -> bool:
    """True for IPv4 and IPv6 literals (IPv6 scope ids allowed)"""
    try:
        ipaddress.ip_address(address)
    except ValueError:
        return False
    return True


class ConfigResolver:
    """Builds the server Configuration from CLI flags, a config file and defaults"""

    def __init__(
        self,
        settings: Optional[StartupSettings] = None,
        logger: Optional[Logger] = None,
        key_manager: Optional[KeyMaterialManager] = None,
    ):
        """
        Initialize the resolver

        Args:
            settings: Default paths; StartupSettings.from_env() when omitted
            logger: Logger for progress and warnings
            key_manager: Key pair manager; built from settings.key_backend when omitted
        """
        self.settings = settings or StartupSettings.from_env()
        self.logger = logger or ConsoleLogger(name="config_resolver", level=logging.INFO)
        self.key_manager = key_manager or KeyMaterialManager(
            create_key_backend(self.settings.key_backend, logger=self.logger),
            logger=self.logger,
        )

    def resolve(self, argv: Optional[Sequence[str]] = None) -> Configuration:
        """
        Parse the command line and resolve the configuration

        argparse itself handles --help, --version and unknown flags.

        Raises:
            ConfigurationError: On the first configuration problem
        """
        return self.resolve_args(build_parser().parse_args(argv))

    def resolve_args(self, args: argparse.Namespace) -> Configuration:
        """
        Resolve the configuration from already parsed command line arguments

        Args:
            args: Namespace produced by build_parser()

        Returns:
            Validated Configuration

        Raises:
            ConfigurationError: On the first configuration problem
        """
        address: str = args.address or ""
        # 0 means "not supplied yet" until the final validation
        port = parse_port(args.port) if args.port else 0

        key_pair: Optional[KeyPair] = None
        if args.public_key and not args.private_key:
            raise ConfigurationError(
                "If you specify a public key file, you also have to specify a private key file."
            )
        if args.private_key and not args.public_key:
            raise ConfigurationError(
                "If you specify a private key file, you also have to specify a public key file."
            )
        if args.private_key and args.public_key:
            key_pair = self.key_manager.resolve(args.private_key, args.public_key)

        file_values = load_config_file(self._select_config_file(args.config), self.settings)

        if not address:
            address = file_values.address
        if port == 0:
            port = file_values.port
        if key_pair is None:
            key_pair = self.key_manager.resolve(
                file_values.private_key_path, file_values.public_key_path
            )

        users = UserRegistry(file_values.users)
        self._validate(address, port, key_pair, users)

        configuration = Configuration(
            address=address,
            port=port,
            private_key_pem=key_pair.private_key_pem,
            public_key_pem=key_pair.public_key_pem,
            users=users,
            config_file=file_values.path,
            private_key_path=key_pair.private_key_path,
            public_key_path=key_pair.public_key_path,
        )
        self.logger.info(
            "Configuration resolved",
            address=address,
            port=port,
            users=len(users),
            config_file=str(file_values.path),
        )
        return configuration

    def _select_config_file(self, explicit: Optional[str]) -> Path:
        if explicit:
            self.logger.debug("Using configuration file from command line", path=explicit)
            return Path(explicit)

        for candidate in self.settings.config_files:
            if candidate.exists():
                self.logger.debug("Using default configuration file", path=str(candidate))
                return candidate

        raise ConfigurationError(
            "No valid configuration file found. You can "
            + self._describe_defaults(self.settings.config_files)
            + "specify your configuration with the --config option.",
            {"searched": [str(p) for p in self.settings.config_files]},
        )

    @staticmethod
    def _describe_defaults(config_files: Sequence[Path]) -> str:
        if not config_files:
            return ""
        return "create one at " + ", ".join(str(p) for p in config_files) + " or "

    def _validate(self, address: str, port: int, key_pair: KeyPair, users: UserRegistry) -> None:
        if port == 0:
            raise ConfigurationError("You specified the only invalid port, which is 0.")

        if not is_valid_address(address):
            raise ConfigurationError(f"The address {address} seems to be invalid.")

        if not key_pair.private_key_pem:
            raise ConfigurationError("No private key specified.")

        if not key_pair.public_key_pem:
            raise ConfigurationError("No public key specified.")

        if len(users) == 0:
            self.logger.warning("There are no users in your configuration.")


def resolve_configuration(
    argv: Optional[Sequence[str]] = None,
    settings: Optional[StartupSettings] = None,
    logger: Optional[Logger] = None,
) -> Configuration:
    """
    Resolve the server configuration from command line arguments

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
        settings: Default paths (default: StartupSettings.from_env())
        logger: Logger for progress and warnings

    Returns:
        Validated Configuration

    Raises:
        ConfigurationError: If the server cannot start with this configuration
    """
    return ConfigResolver(settings=settings, logger=logger).resolve(argv)
