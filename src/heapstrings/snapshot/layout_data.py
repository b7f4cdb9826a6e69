"""
Debug-layout data acquisition.

Attaching a runtime may need the layout data file matching the exact runtime
build. It is looked for, in order, at the location the snapshot names on this
machine and in the local cache. If neither has it, the operator is asked
before the provider fetches a copy into the cache.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..models.config import LayoutDataConfig
from ..models.snapshot import LayoutDataInfo, RuntimeDescriptor
from ..validation import ErrorSeverity, handle_file_error

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def layout_data_relative_path(info: LayoutDataInfo) -> Path:
    """Symbol-server style key: <file>/<timestamp><size>/<file>, hex without padding."""
    return Path(info.file_name) / f"{info.timestamp:x}{info.file_size:x}" / info.file_name


def layout_data_cache_path(info: LayoutDataInfo, cache_dir: Path) -> Path:
    return Path(cache_dir) / layout_data_relative_path(info)


def locate_layout_data(descriptor: RuntimeDescriptor, cache_dir: Path) -> Optional[Path]:
    """
    Find layout data for a runtime without fetching anything.

    Returns:
        The local path or the cached copy, whichever exists first, else None.
    """
    info = descriptor.layout_data
    if info is None:
        return None

    if info.local_path and Path(info.local_path).is_file():
        logger.info(f"Layout data already exists on the local machine at: {info.local_path}")
        return Path(info.local_path)

    cached = layout_data_cache_path(info, cache_dir)
    if cached.is_file():
        logger.info(f"Layout data {info.file_name} already exists in the local cache at: {cached}")
        return cached
    return None


def confirm_on_console(message: str) -> bool:
    """Print `message` and wait for ENTER; any other answer, EOF or Ctrl-C declines."""
    print(message)
    print("Press <ENTER> if you are okay with this, if not type 'n' or Ctrl-C to skip")
    try:
        answer = input()
    except (EOFError, KeyboardInterrupt):
        return False
    return answer.strip().lower() in ("", "y", "yes")


def acquire_layout_data(
    descriptor: RuntimeDescriptor,
    provider,
    config: LayoutDataConfig,
    confirm: Optional[Confirm] = None,
) -> Optional[Path]:
    """
    Locate, or with the operator's consent fetch, layout data for a runtime.

    Args:
        descriptor: Runtime whose layout data is needed.
        provider: SnapshotProvider able to download layout data.
        config: Cache location and confirmation setting.
        confirm: Asks the operator a yes/no question; defaults to the console.

    Returns:
        Path to usable layout data, or None to attach without it.
    """
    info = descriptor.layout_data
    if info is None:
        logger.debug(f"Runtime {descriptor.version} does not name any layout data")
        return None

    found = locate_layout_data(descriptor, config.cache_dir)
    if found is not None:
        return found

    destination = layout_data_cache_path(info, config.cache_dir)
    logger.warning(
        f"Unable to find a copy of the layout data ({info.file_name}) on the local machine. "
        f"Expected location: {destination}"
    )

    if config.confirm_download:
        ask = confirm or confirm_on_console
        approved = ask(
            f"Layout data {info.file_name} will now be fetched into:\n{destination}"
        )
        if not approved:
            logger.warning("Layout data download declined, attaching without it")
            return None

    try:
        downloaded = provider.download_layout_data(descriptor, destination)
    except OSError as e:
        handle_file_error(
            error=e,
            context=f"fetching layout data {info.file_name}",
            severity=ErrorSeverity.WARNING,
            reraise=False,
            logger=logger,
        )
        return None

    if downloaded is not None:
        logger.info(f"Downloaded a copy of the layout data to: {downloaded}")
    return downloaded
