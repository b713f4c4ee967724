"""Background task for refreshing the OpenList library index"""

import asyncio
import functools
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from ..cache.metainfo import MetaInfoCache
from ..config import OpenListConfig, OpenShelfConfig, TMDBConfig, get_config
from ..database.store import MetadataStore
from ..errors import (
    ConfigurationError,
    ListingError,
    PersistenceError,
    ResolutionFailure,
    SeasonLookupFailure,
)
from ..index.keys import generate_folder_key
from ..index.models import FolderInfo, MetaInfo, RemoteFolder, now_ms
from ..index.reader import load_meta_info
from ..media.libraries.base import RemoteLister
from ..media.libraries.openlist import OpenListClient
from ..media.providers.base import MetadataSearchProvider, SeasonDetails
from ..media.providers.tmdb import TMDBProvider
from ..media.season_parser import parse_season_from_title
from ..tasks.scan_task import ScanCounts, ScanTask, ScanTaskTracker
from ..utils.config_updater import ConfigUpdater

logger = logging.getLogger(__name__)

ListerFactory = Callable[[OpenListConfig], RemoteLister]
ProviderFactory = Callable[[TMDBConfig], MetadataSearchProvider]


class ScanPhase(str, Enum):
    """Phase of a running library scan."""
    IDLE = "idle"
    LISTING = "listing"
    DIFFING = "diffing"
    RESOLVING = "resolving"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    FAILED = "failed"


def _default_lister_factory(openlist_config: OpenListConfig) -> RemoteLister:
    return OpenListClient(
        openlist_config.url,
        openlist_config.username,
        openlist_config.password,
    )


def _default_provider_factory(tmdb_config: TMDBConfig) -> MetadataSearchProvider:
    return TMDBProvider(
        api_key=tmdb_config.api_key,
        proxy=tmdb_config.proxy,
        language=tmdb_config.language,
    )


class LibraryRefresher:
    """
    Scans the OpenList root and matches new folders against TMDB.

    Each call to ``start_refresh()`` creates a scan task and runs the scan
    as a background asyncio task. The outcome is only observable through
    the task tracker, or by awaiting ``join()``.
    """

    def __init__(
        self,
        store: MetadataStore,
        cache: MetaInfoCache,
        tracker: ScanTaskTracker,
        config: OpenShelfConfig | None = None,
        lister_factory: ListerFactory | None = None,
        provider_factory: ProviderFactory | None = None,
        config_updater: ConfigUpdater | None = None,
        item_delay: float | None = None,
    ):
        """
        Initialize the refresher.

        Args:
            store: Store holding the persisted index
            cache: Per-root index cache
            tracker: Scan task tracker
            config: Configuration (defaults to the global config)
            lister_factory: Builds the remote lister for a scan
            provider_factory: Builds the catalog search provider for a scan
            config_updater: Persists refresh stats back to the config file
            item_delay: Seconds to wait after each catalog lookup
        """
        self.store = store
        self.cache = cache
        self.tracker = tracker
        self.config = config or get_config()
        self.lister_factory = lister_factory or _default_lister_factory
        self.provider_factory = provider_factory or _default_provider_factory
        self.config_updater = config_updater or ConfigUpdater()
        self.item_delay = (
            self.config.refresh.item_delay_seconds if item_delay is None else item_delay
        )

        self._scans: Dict[str, asyncio.Task] = {}
        self._phases: Dict[str, ScanPhase] = {}

    @property
    def metainfo_key(self) -> str:
        return self.config.refresh.metainfo_key

    @property
    def root_path(self) -> str:
        return self.config.openlist.root_path or "/"

    def phase(self, task_id: str) -> ScanPhase:
        """Current phase of a scan started by this refresher."""
        return self._phases.get(task_id, ScanPhase.IDLE)

    def _set_phase(self, task_id: str, phase: ScanPhase) -> None:
        self._phases[task_id] = phase
        logger.info(f"Scan {task_id}: {phase.value}")

    def _check_configuration(self) -> None:
        openlist_config = self.config.openlist
        if not openlist_config.enabled:
            raise ConfigurationError("OpenList is not enabled")
        if not openlist_config.url:
            raise ConfigurationError("OpenList URL is not configured")
        if not openlist_config.username or not openlist_config.password:
            raise ConfigurationError("OpenList username and password are not configured")
        if not self.config.tmdb.api_key:
            raise ConfigurationError("TMDB API key is not configured")

    async def start_refresh(self, reset_index: bool = False) -> dict[str, str]:
        """
        Start a library scan in the background.

        Args:
            reset_index: Discard the stored index and resolve every folder again

        Returns:
            ``{"task_id": ...}`` for polling the tracker

        Raises:
            ConfigurationError: If OpenList or TMDB settings are incomplete
        """
        self._check_configuration()

        if self.tracker.cleanup_old():
            self._forget_purged_phases()
        task_id = self.tracker.create()

        scan = asyncio.create_task(
            self._perform_scan(task_id, reset_index), name=f"library-refresh-{task_id}"
        )
        self._scans[task_id] = scan
        scan.add_done_callback(functools.partial(self._on_scan_done, task_id))

        logger.info(f"Started library refresh {task_id} (reset_index={reset_index})")
        return {"task_id": task_id}

    def _on_scan_done(self, task_id: str, scan: asyncio.Task) -> None:
        """Consume the outcome of a finished background scan."""
        self._scans.pop(task_id, None)

        if scan.cancelled():
            logger.warning(f"Library refresh {task_id} was cancelled")
            self.tracker.fail(task_id, "Scan cancelled")
            return

        error = scan.exception()
        if error is not None:
            logger.error(f"Library refresh {task_id} failed in background: {error}")
        else:
            logger.info(f"Library refresh {task_id} finished")

    def _forget_purged_phases(self) -> None:
        for task_id in [t for t in self._phases if self.tracker.get(t) is None]:
            del self._phases[task_id]

    async def join(self, task_id: str) -> Optional[ScanTask]:
        """Wait for a scan to finish and return its final task record."""
        scan = self._scans.get(task_id)
        if scan is not None:
            await asyncio.gather(scan, return_exceptions=True)
        return self.tracker.get(task_id)

    async def shutdown(self) -> None:
        """Wait for all outstanding scans."""
        scans = list(self._scans.values())
        if scans:
            logger.info(f"Waiting for {len(scans)} library refresh(es) to finish")
            await asyncio.gather(*scans, return_exceptions=True)

    async def _perform_scan(self, task_id: str, reset_index: bool) -> None:
        root = self.root_path
        lister: Optional[RemoteLister] = None
        provider: Optional[MetadataSearchProvider] = None

        self.tracker.update_progress(task_id, 0, 0)

        try:
            lister = self.lister_factory(self.config.openlist)
            provider = self.provider_factory(self.config.tmdb)

            self._set_phase(task_id, ScanPhase.LISTING)
            folders = await self._list_folders(lister, root)
            self.tracker.update_progress(task_id, 0, len(folders))
            logger.info(f"Found {len(folders)} folders under {root}")

            self._set_phase(task_id, ScanPhase.DIFFING)
            meta_info = await self._load_index(reset_index)
            await self.cache.invalidate(root)

            existing_keys: Set[str] = set(meta_info.folders)
            name_index = meta_info.name_index()
            seen_in_scan: Set[str] = set()

            self._set_phase(task_id, ScanPhase.RESOLVING)
            counts = ScanCounts(total=len(folders))

            for index, folder in enumerate(folders):
                known = not reset_index and folder.name in name_index
                if known or folder.name in seen_in_scan:
                    counts.existing += 1
                else:
                    seen_in_scan.add(folder.name)
                    folder_key = generate_folder_key(folder.name, existing_keys)
                    existing_keys.add(folder_key)
                    name_index[folder.name] = folder_key

                    info = await self._resolve_folder(folder.name, provider)
                    meta_info.folders[folder_key] = info
                    if info.failed:
                        counts.errors += 1
                    else:
                        counts.new += 1

                    # TMDB rate limit
                    await asyncio.sleep(self.item_delay)

                self.tracker.update_progress(task_id, index + 1, len(folders), folder.name)

            self._set_phase(task_id, ScanPhase.PERSISTING)
            await self._persist(root, meta_info)

            self.tracker.complete(task_id, counts)
            self._set_phase(task_id, ScanPhase.COMPLETED)

        except Exception as e:
            self._set_phase(task_id, ScanPhase.FAILED)
            self.tracker.fail(task_id, str(e))
            raise

        finally:
            await self._close_clients(lister, provider)

    async def _list_folders(self, lister: RemoteLister, root: str) -> List[RemoteFolder]:
        """
        Collect every directory under ``root``.

        Pages are requested until the number of listed entries (files
        included) reaches the reported total, or a page comes back empty.

        Raises:
            ListingError: On any non-success page
        """
        page_size = self.config.refresh.page_size
        folders: List[RemoteFolder] = []
        listed = 0
        page = 1

        while True:
            response = await lister.list_directory(root, page=page, per_page=page_size, refresh=True)
            if not response.is_success:
                raise ListingError(
                    f"OpenList listing failed for {root} (page {page}, code {response.code}): "
                    f"{response.message}",
                    code=response.code,
                    page=page,
                )

            entries = response.data.content
            listed += len(entries)
            folders.extend(entry.to_folder() for entry in entries if entry.is_dir)

            if not entries or listed >= response.data.total:
                break
            page += 1

        return folders

    async def _load_index(self, reset_index: bool) -> MetaInfo:
        if reset_index:
            return MetaInfo.empty()

        meta_info = await load_meta_info(self.store, self.metainfo_key)
        if meta_info is None:
            logger.info("No usable stored metainfo, starting with an empty index")
            return MetaInfo.empty()
        return meta_info

    async def _resolve_folder(self, folder_name: str, provider: MetadataSearchProvider) -> FolderInfo:
        """Resolve one folder. Never raises; failures become placeholders."""
        try:
            return await self._match_folder(folder_name, provider)
        except ResolutionFailure as e:
            logger.info(f"No catalog match: {e}")
        except Exception as e:
            logger.exception(f"Error resolving folder {folder_name!r}: {e}")
        return FolderInfo.placeholder(folder_name)

    async def _match_folder(self, folder_name: str, provider: MetadataSearchProvider) -> FolderInfo:
        season_info = parse_season_from_title(folder_name)
        query = season_info.clean_title or folder_name

        logger.debug(
            f"Resolving {folder_name!r}: query={query!r} "
            f"season={season_info.season_number} year={season_info.year}"
        )

        result = await provider.search(query, year=season_info.year)
        if not result.is_ok:
            kind = result.kind.value if result.kind else "empty"
            raise ResolutionFailure(folder_name, f"search for {query!r} failed ({kind}) {result.message}")

        match = result.value
        info = FolderInfo(
            folder_name=folder_name,
            tmdb_id=match.id,
            title=match.title or folder_name,
            overview=match.overview or "",
            poster_path=match.poster_path,
            release_date=match.release_date or "",
            vote_average=match.vote_average,
            media_type=match.media_type,
        )

        if info.is_tv and season_info.season_number:
            try:
                season = await self._fetch_season(
                    provider, folder_name, match.id, season_info.season_number
                )
            except Exception as e:
                logger.warning(f"Keeping series data for {folder_name!r}: {e}")
                info.season_number = season_info.season_number
            else:
                self._apply_season(info, season)

        return info

    async def _fetch_season(
        self,
        provider: MetadataSearchProvider,
        folder_name: str,
        tv_id: int,
        season_number: int,
    ) -> SeasonDetails:
        result = await provider.get_tv_season_details(tv_id, season_number)
        if not result.is_ok:
            raise SeasonLookupFailure(
                folder_name, f"season {season_number} of {tv_id} unavailable: {result.message}"
            )
        return result.value

    @staticmethod
    def _apply_season(info: FolderInfo, season: SeasonDetails) -> None:
        info.season_number = season.season_number
        info.season_name = season.name

        # Season 1 keeps the series title
        if season.season_number > 1:
            info.title = f"{info.title} {season.name}"

        if season.poster_path:
            info.poster_path = season.poster_path
        if season.overview:
            info.overview = season.overview
        if season.air_date:
            info.release_date = season.air_date

    async def _persist(self, root: str, meta_info: MetaInfo) -> None:
        try:
            refreshed_at = now_ms()
            meta_info.last_refresh = refreshed_at
            await self.store.set_global_value(self.metainfo_key, meta_info.to_json())

            await self.cache.invalidate(root)
            await self.cache.set(root, meta_info)

            self.config_updater.update_openlist_stats(
                last_refresh_time=refreshed_at,
                resource_count=len(meta_info.folders),
            )
        except Exception as e:
            raise PersistenceError(f"Failed to save metainfo: {e}") from e

        logger.info(f"Saved metainfo with {len(meta_info.folders)} folders")

    async def _close_clients(
        self,
        lister: Optional[RemoteLister],
        provider: Optional[MetadataSearchProvider],
    ) -> None:
        for client in (lister, provider):
            if client is None:
                continue
            try:
                await client.close()
            except Exception as e:
                logger.warning(f"Error closing {client!r}: {e}")
