"""pruefungsplaner-auth entry point

Resolves the startup configuration and reports it. This is the only place
where configuration errors end the process.
"""

import logging
import sys
from typing import Optional, Sequence

from pruefungsplaner_auth import __version__
from pruefungsplaner_auth.exceptions import ConfigurationError
from pruefungsplaner_auth.logger import ConsoleLogger
from pruefungsplaner_auth.models import Configuration
from pruefungsplaner_auth.settings import StartupSettings
from pruefungsplaner_auth.startup import ConfigResolver, build_parser


def load_configuration(
    argv: Optional[Sequence[str]] = None, settings: Optional[StartupSettings] = None
) -> Configuration:
    """
    Resolve the configuration or terminate the process

    Prints the error message as a single line on stderr and exits with code 1
    when the configuration is unusable.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
        settings: Default paths (default: StartupSettings.from_env())

    Returns:
        Validated Configuration
    """
    args = build_parser().parse_args(argv)
    logger = ConsoleLogger(
        name="pruefungsplaner_auth", level=getattr(logging, args.log_level, logging.INFO)
    )

    try:
        resolver = ConfigResolver(settings=settings or StartupSettings.from_env(), logger=logger)
        return resolver.resolve_args(args)
    except ConfigurationError as e:
        # stderr carries exactly one line: the message below
        logger.debug("FATAL: Configuration error", error=type(e).__name__, **e.details)
        print(e.message, file=sys.stderr, flush=True)
        sys.exit(1)


def main(argv: Optional[Sequence[str]] = None) -> int:
    configuration = load_configuration(argv)

    banner = f"""
{'='*80}
  pruefungsplaner-auth - Configuration loaded
{'='*80}
  Version:          {__version__}
  Address:          {configuration.address}
  Port:             {configuration.port}
  Config File:      {configuration.config_file}
  Private Key:      {configuration.private_key_path}
  Public Key:       {configuration.public_key_path}
  Users:            {len(configuration.users)}
{'='*80}
"""
    print(banner)
    return 0


if __name__ == "__main__":
    sys.exit(main())
