"""
DNS Redirect Main Entry Point

Loads the redirection table from storage and answers lookups from the command
line, optionally reloading whenever the hosts files change.
"""

import argparse
import sys
import threading
from typing import List, Optional

from dns_redirect.config.loader import ConfigLoader
from dns_redirect.config.schema import EmummcConfig, RedirectConfig
from dns_redirect.core import HostRedirectionResolver, InitializationError
from dns_redirect.core.reloader import HostsFileWatcher
from dns_redirect.core.storage import LocalStorage
from dns_redirect.dns_logging import get_logger, log_exception, setup_logging


class RedirectApp:
    """DNS Redirect Application"""

    def __init__(self, config: RedirectConfig):
        self.config = config
        self.resolver = HostRedirectionResolver.from_config(config)
        self.watcher: Optional[HostsFileWatcher] = None
        self._shutdown_event = threading.Event()
        setup_logging(config.logging)
        self.logger = get_logger("dns_redirect_app")

    def initialize(self, add_defaults: Optional[bool] = None) -> bool:
        """Load redirections; returns False if loading failed and was tolerated"""
        try:
            count = self.resolver.initialize(add_defaults)
        except InitializationError as e:
            log_exception(self.logger, "Failed to load redirections", e)
            if self.config.hosts.fail_on_error:
                raise
            self.logger.warning("Continuing with an empty redirection table")
            return False

        self.logger.info(
            "Redirections loaded",
            count=count,
            storage_root=self.config.storage.root,
            emummc_active=self.config.emummc.active,
            emummc_id="%04x" % self.config.emummc.id,
        )
        return True

    def resolve(self, hostname: str) -> str:
        """Format the lookup result for one hostname"""
        address = self.resolver.resolve(hostname)
        if address is None:
            return f"{hostname} -> not redirected"
        return f"{hostname} -> {address}"

    def watch(self) -> None:
        """Reload on hosts file changes until stop() is called"""
        self.watcher = HostsFileWatcher(
            self.resolver,
            LocalStorage(self.config.storage.root),
            debounce=self.config.hosts.reload_debounce,
        )
        self.watcher.start()
        try:
            self._shutdown_event.wait()
        finally:
            self.watcher.stop()
            self.logger.info("Hosts file watcher stopped")

    def stop(self) -> None:
        self._shutdown_event.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DNS host redirection resolver")
    parser.add_argument("--config", "-c", default=None, help="Configuration file path")
    parser.add_argument(
        "--storage-root", default=None, help="Local directory holding /hosts"
    )
    parser.add_argument(
        "--no-defaults",
        action="store_true",
        help="Do not apply the built-in telemetry redirections",
    )
    parser.add_argument(
        "--emummc-id",
        default=None,
        help="Treat emulated storage as active with this id (e.g. 0x0012)",
    )
    parser.add_argument(
        "--watch", action="store_true", help="Reload when hosts files change"
    )
    parser.add_argument("hostnames", nargs="*", help="Hostnames to look up")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader(args.config).load_config()
        if args.storage_root is not None:
            config.storage.root = args.storage_root
        if args.emummc_id is not None:
            config.emummc = EmummcConfig(active=True, id=args.emummc_id)
        if args.no_defaults:
            config.hosts.add_defaults = False
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    app = RedirectApp(config)

    try:
        app.initialize()
    except InitializationError:
        return 1

    for hostname in args.hostnames:
        print(app.resolve(hostname))

    if args.watch or config.hosts.watch:
        try:
            app.watch()
        except KeyboardInterrupt:
            print("\nReceived keyboard interrupt")

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
