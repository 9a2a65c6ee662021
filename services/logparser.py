"""
Hub Log Parser Module
Extracts peer gossip addresses from a newline-delimited JSON hub log
"""

import asyncio
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_gossip_addresses(log_path):
    """
    Collect peerInfo.gossipAddress.address from every log line

    Lines that are empty, not JSON, or without an address are skipped.
    Order and duplicates are kept.

    Args:
        log_path: Path to the hub log file

    Returns:
        List of address strings

    Raises:
        FileNotFoundError: log file does not exist
    """
    path = Path(log_path)
    if not path.exists():
        raise FileNotFoundError(f"File {log_path} does not exist")

    addresses = []
    skipped = 0
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                skipped += 1
                continue

            address = _gossip_address(entry)
            if address:
                addresses.append(address)

    if skipped:
        logger.debug("Skipped %d unparseable lines in %s", skipped, log_path)
    logger.info("Found %d gossip addresses in %s", len(addresses), log_path)
    return addresses


def _gossip_address(entry):
    if not isinstance(entry, dict):
        return None
    peer_info = entry.get("peerInfo")
    if not isinstance(peer_info, dict):
        return None
    gossip = peer_info.get("gossipAddress")
    if not isinstance(gossip, dict):
        return None
    address = gossip.get("address")
    return address if isinstance(address, str) else None


class HubLogMonitor:
    """Tracks the hub log's modification time between polls"""

    def __init__(self, log_path):
        self.log_path = Path(log_path)
        self._last_mtime = None

    def changed(self):
        """True the first time and whenever the file's mtime moved since the last call"""
        try:
            mtime = self.log_path.stat().st_mtime
        except OSError:
            return False
        if mtime == self._last_mtime:
            return False
        self._last_mtime = mtime
        return True


def process_hub_log(geolocator, log_path):
    """
    Parse the hub log and merge every new address into the geolocator

    Returns:
        Set of all IP keys known after the merge
    """
    addresses = parse_gossip_addresses(log_path)
    return asyncio.run(geolocator.merge_and_lookup(addresses))
