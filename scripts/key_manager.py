#!/usr/bin/env python3
"""RSA Key Pair Management CLI

Command-line utility to prepare and inspect the key pair used by the
pruefungsplaner-auth server to sign tokens.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pruefungsplaner_auth.exceptions import KeyMaterialError
from pruefungsplaner_auth.keys import KeyMaterialManager, create_key_backend
from pruefungsplaner_auth.logger import ConsoleLogger
from pruefungsplaner_auth.settings import StartupSettings


def _paths(args):
    settings = StartupSettings.from_env()
    private_key = Path(args.private_key) if args.private_key else settings.private_key_path
    public_key = Path(args.public_key) if args.public_key else settings.public_key_path
    return private_key, public_key


def ensure_keys(args):
    """Generate missing key files and check the pair"""
    logger = ConsoleLogger(name="key_manager", level=logging.INFO)
    private_key, public_key = _paths(args)

    try:
        manager = KeyMaterialManager(
            create_key_backend(args.backend, logger=logger), logger=logger, key_size=args.bits
        )
        manager.resolve(private_key, public_key)
    except KeyMaterialError as e:
        print(f"\n✗ {e}\n", file=sys.stderr)
        return 1

    print("\n✓ Key pair ready\n")
    print(f"Private key: {private_key}")
    print(f"Public key:  {public_key}\n")
    return 0


def check_keys(args):
    """Validate an existing pair without creating any file"""
    logger = ConsoleLogger(name="key_manager", level=logging.INFO)
    private_key, public_key = _paths(args)

    try:
        backend = create_key_backend(args.backend, logger=logger)
    except KeyMaterialError as e:
        print(f"\n✗ {e}\n", file=sys.stderr)
        return 1

    checks = [
        ("Private key exists", private_key.exists()),
        ("Public key exists", public_key.exists()),
    ]
    if private_key.exists():
        checks.append(("Private key is valid", backend.validate_private_key(private_key)))
    if public_key.exists():
        checks.append(("Public key is valid", backend.validate_public_key(public_key)))
    if all(passed for _, passed in checks):
        checks.append(("Keys belong together", backend.keys_match(private_key, public_key)))

    print()
    for label, passed in checks:
        print(f"{'✓' if passed else '✗'} {label}")
    print()

    return 0 if all(passed for _, passed in checks) else 1


def main():
    parser = argparse.ArgumentParser(
        description="pruefungsplaner-auth Key Manager - Prepare and check the RSA signing keys",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate missing keys at the default location
  python key_manager.py ensure

  # Generate keys in a custom location using the openssl binary
  python key_manager.py --backend openssl ensure --private-key ./private.pem --public-key ./public.pem

  # Check an existing pair
  python key_manager.py check --private-key ./private.pem --public-key ./public.pem

Environment Variables:
  PRUEFUNGSPLANER_AUTH_KEYS_DIR    Directory of the default key files
        """,
    )

    parser.add_argument(
        "--backend",
        choices=["cryptography", "openssl"],
        default="cryptography",
        help="Key toolchain to use (default: cryptography)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    ensure_parser = subparsers.add_parser("ensure", help="Generate missing keys and check the pair")
    ensure_parser.add_argument("--private-key", type=str, default=None, help="Private key file")
    ensure_parser.add_argument("--public-key", type=str, default=None, help="Public key file")
    ensure_parser.add_argument(
        "--bits", type=int, default=2048, help="Size of a newly generated key (default: 2048)"
    )

    check_parser = subparsers.add_parser("check", help="Validate an existing key pair")
    check_parser.add_argument("--private-key", type=str, default=None, help="Private key file")
    check_parser.add_argument("--public-key", type=str, default=None, help="Public key file")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "ensure":
        return ensure_keys(args)
    elif args.command == "check":
        return check_keys(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
