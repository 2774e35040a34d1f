import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import httpx

from config import SOURCE_NAMES
from ingest import decode_bytes, parse_csv_text

logger = logging.getLogger(__name__)

Records = List[Dict[str, str]]

@dataclass(frozen=True)
class Datasets:
    hosts: Records = field(default_factory=list)
    guests: Records = field(default_factory=list)
    matches: Records = field(default_factory=list)
    incidents: Records = field(default_factory=list)
    comms: Records = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in SOURCE_NAMES}

def _is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))

async def _read_remote(client: httpx.AsyncClient, location: str) -> Optional[str]:
    response = await client.get(location, headers={"Cache-Control": "no-store"}, follow_redirects=True)
    if not response.is_success:
        logger.warning("Source %s returned HTTP %s; using empty collection", location, response.status_code)
        return None
    return decode_bytes(response.content)

async def _read_local(location: str) -> str:
    raw = await asyncio.to_thread(Path(location).read_bytes)
    return decode_bytes(raw)

async def fetch_records(client: httpx.AsyncClient, location: str) -> Records:
    """
    Fetch and decode one source. Any failure yields [] for this source only.
    """
    try:
        if _is_remote(location):
            text = await _read_remote(client, location)
            if text is None:
                return []
        else:
            text = await _read_local(location)
    except (httpx.HTTPError, OSError) as e:
        logger.warning("Could not load %s (%s); using empty collection", location, e)
        return []
    return parse_csv_text(text)

async def load_datasets(sources: Mapping[str, str],
                        client: Optional[httpx.AsyncClient] = None,
                        timeout: float = 10.0) -> Datasets:
    """
    Fetch the five named sources concurrently and decode each one.

    Names missing from `sources` load as empty. Completes once every fetch
    has settled.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)

    async def one(name: str) -> Records:
        location = sources.get(name)
        if not location:
            return []
        return await fetch_records(client, location)

    try:
        results = await asyncio.gather(*(one(name) for name in SOURCE_NAMES))
    finally:
        if owns_client:
            await client.aclose()

    datasets = Datasets(**dict(zip(SOURCE_NAMES, results)))
    logger.info("Loaded datasets: %s", datasets.counts())
    return datasets

def load_datasets_sync(sources: Mapping[str, str], timeout: float = 10.0) -> Datasets:
    return asyncio.run(load_datasets(sources, timeout=timeout))

class DatasetStore:
    """
    Holds the current Datasets; each refresh swaps in a complete new value.
    When refreshes overlap, only the most recently started one is kept.
    """

    def __init__(self, sources: Mapping[str, str], timeout: float = 10.0,
                 client: Optional[httpx.AsyncClient] = None) -> None:
        self._sources = dict(sources)
        self._timeout = timeout
        self._client = client
        self.current = Datasets()
        self._generation = 0

    async def refresh(self) -> Datasets:
        self._generation += 1
        generation = self._generation
        datasets = await load_datasets(self._sources, client=self._client, timeout=self._timeout)
        if generation == self._generation:
            self.current = datasets
        else:
            logger.info("Discarding load %d; a newer refresh started", generation)
        return self.current
