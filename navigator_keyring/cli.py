"""
Navigator Keyring CLI — entry point for all operations.

Usage:
    navigator-keyring add <service> [password]   # Seal and store a password
    navigator-keyring get <service>              # Print a stored password
    navigator-keyring delete <service>           # Remove a stored password
    navigator-keyring list                       # List service names

Exit status:
    0  success
    1  service not found
    2  usage error
    3  key, data file or decryption failure
"""
from __future__ import annotations

import sys
import getpass
import logging
import argparse

from pydantic import ValidationError

from .exceptions import KeyringError, NotFoundError
from .vault import KeyringConfig, SecretVault

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2
EXIT_ERROR = 3

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_log_handler: logging.Handler | None = None


def setup_logging(verbose: bool = False) -> logging.Handler:
    """Send keyring log records to the current stderr.

    Calling it again replaces the handler installed by the previous call.
    """
    global _log_handler
    logger = logging.getLogger("navigator.keyring")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _LOG_DATEFMT))
    logger.addHandler(_log_handler)
    return _log_handler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="navigator-keyring",
        description="Navigator Keyring — service passwords encrypted on local disk.",
    )
    parser.add_argument("--data-file", help="Records document (env: KEYRING_DATA_FILE)")
    parser.add_argument("--key-file", help="Master key file (env: KEYRING_KEY_FILE)")
    parser.add_argument(
        "--cipher",
        choices=["aesgcm", "chacha20"],
        help="AEAD cipher (env: KEYRING_CIPHER_BACKEND, default: aesgcm)",
    )
    parser.add_argument(
        "--bind-service",
        action="store_true",
        default=None,
        help="Authenticate the service name together with its secret",
    )
    parser.add_argument(
        "--recover-corrupt",
        action="store_true",
        default=None,
        help="Start from an empty store if the data file is corrupt",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command")

    add_parser = subparsers.add_parser("add", help="Seal and store a password")
    add_parser.add_argument("service")
    add_parser.add_argument(
        "password", nargs="?", help="Password (prompted for when omitted)"
    )

    get_parser = subparsers.add_parser("get", help="Print a stored password")
    get_parser.add_argument("service")

    delete_parser = subparsers.add_parser("delete", help="Remove a stored password")
    delete_parser.add_argument("service")

    subparsers.add_parser("list", help="List service names")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command is None:
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    try:
        config = KeyringConfig.from_env(
            data_file=args.data_file,
            key_file=args.key_file,
            cipher_backend=args.cipher,
            bind_service=args.bind_service,
            recover_corrupt_store=args.recover_corrupt,
        )
    except ValidationError as err:
        print(f"error: invalid configuration: {err}", file=sys.stderr)
        return EXIT_USAGE

    try:
        vault = SecretVault(config)
        if args.command == "add":
            return _cmd_add(vault, args)
        elif args.command == "get":
            return _cmd_get(vault, args)
        elif args.command == "delete":
            return _cmd_delete(vault, args)
        elif args.command == "list":
            return _cmd_list(vault)
    except NotFoundError as err:
        print(err, file=sys.stderr)
        return EXIT_NOT_FOUND
    except KeyringError as err:
        print(f"error: {err}", file=sys.stderr)
        return EXIT_ERROR
    except ValueError as err:
        print(f"error: {err}", file=sys.stderr)
        return EXIT_USAGE
    parser.print_usage(sys.stderr)
    return EXIT_USAGE


def _cmd_add(vault: SecretVault, args: argparse.Namespace) -> int:
    password = args.password
    if password is None:
        password = getpass.getpass(f"Password for {args.service}: ")
    vault.add(args.service, password)
    print(f"Stored password for '{args.service}'.")
    return EXIT_OK


def _cmd_get(vault: SecretVault, args: argparse.Namespace) -> int:
    print(vault.get(args.service))
    return EXIT_OK


def _cmd_delete(vault: SecretVault, args: argparse.Namespace) -> int:
    if vault.delete(args.service):
        print(f"Deleted password for '{args.service}'.")
    else:
        print(f"Nothing stored for '{args.service}'.")
    return EXIT_OK


def _cmd_list(vault: SecretVault) -> int:
    for service in sorted(vault.services()):
        print(service)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
