"""
Hosts File Selector

Chooses which hosts file to load. Candidates are tried in order and the
first that exists wins; /hosts/default is the unconditional last resort
because the initializer provisions it before selection runs.
"""

from typing import Tuple

from .environment import EmulatedStorageInfo
from .startup_log import StartupLog
from .storage import StorageService

HOSTS_DIRECTORY = "/hosts"
DEFAULT_HOSTS_PATH = "/hosts/default"
SYSMMC_HOSTS_PATH = "/hosts/sysmmc"
EMUMMC_HOSTS_PATH = "/hosts/emummc"


def specific_emummc_hosts_path(emummc_id: int) -> str:
    """Path of the hosts file for one emummc instance, e.g. /hosts/emummc_0012"""
    return "%s_%04x" % (EMUMMC_HOSTS_PATH, emummc_id)


def hosts_file_candidates(is_emummc: bool, emummc_id: int = 0) -> Tuple[str, ...]:
    """Ordered fallback chain of hosts file paths for the storage mode"""
    if is_emummc:
        return (
            specific_emummc_hosts_path(emummc_id),
            EMUMMC_HOSTS_PATH,
            DEFAULT_HOSTS_PATH,
        )
    return (SYSMMC_HOSTS_PATH, DEFAULT_HOSTS_PATH)


def select_hosts_file(
    storage: StorageService,
    environment: EmulatedStorageInfo,
    startup_log: StartupLog,
) -> str:
    """Return the first existing candidate, logging every skipped path.

    Args:
        storage: Storage used to check for candidate files
        environment: Emulated storage detection
        startup_log: Open startup log

    Returns:
        Storage path of the hosts file to load
    """
    startup_log.write("Selecting hosts file...\n")

    *candidates, fallback = hosts_file_candidates(
        environment.is_active(), environment.active_id()
    )
    for path in candidates:
        if storage.exists(path):
            return path
        startup_log.write("Skipping %s because it does not exist...\n", path)

    return fallback
