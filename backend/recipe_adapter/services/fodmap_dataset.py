"""
Public FODMAP food list: download, cache and per-ingredient rating.

The dataset is a community-maintained JSON file whose shape has varied over
time: either a top-level list of foods or an object holding the list under
``list``, ``items`` or ``foods``. Ratings are free text ("safe", "avoid",
"amber", ...) and are normalized by keyword.

Any download or parse failure is logged and yields an empty dataset, so
callers always get something to rate against.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests
from pydantic import ValidationError

from recipe_adapter.config import settings
from recipe_adapter.models.fodmap import FodmapDataset, FodmapEntry, FodmapRating, IngredientRating
from recipe_adapter.utils.helpers import normalize_ingredient_name, to_iso, utc_now

# Configure logging
logger = logging.getLogger(__name__)

# Keyword groups checked in order; first group with a hit wins
_RATING_KEYWORDS = [
    (FodmapRating.LOW, ["safe", "low", "green", "allowed", "ok", "yes", "low fodmap"]),
    (FodmapRating.MODERATE, ["medium", "moderate", "amber", "orange"]),
    (FodmapRating.HIGH, ["high", "red", "avoid", "no", "not allowed"]),
]


def map_repo_rating(value: Any) -> FodmapRating:
    """
    Normalize a dataset rating value.

    Substring keywords, so "not allowed" is rated low because it contains
    "allowed". Kept as-is to match the published list's conventions.

    Example:
        >>> map_repo_rating("Amber")
        FodmapRating.MODERATE
        >>> map_repo_rating(None)
        FodmapRating.UNKNOWN
    """
    if value is None:
        return FodmapRating.UNKNOWN
    text = str(value).lower()
    for rating, keywords in _RATING_KEYWORDS:
        if any(k in text for k in keywords):
            return rating
    return FodmapRating.UNKNOWN


def _first(item: Dict, *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _entry_from_list_item(item: Dict) -> Optional[FodmapEntry]:
    """Entry from the top-level-list layout."""
    name = _first(item, "name", "food", "title")
    if not name:
        return None
    source = item.get("sources") or item.get("source")
    if source is not None and not isinstance(source, list):
        source = [source]
    return FodmapEntry(
        name=str(name),
        group=_as_str(_first(item, "group", "category")),
        category=_as_str(_first(item, "category", "type")),
        rating=map_repo_rating(_first(item, "group", "category", "rating", "status")),
        details=_as_str(_first(item, "notes", "comment", "description")),
        serving_note=_as_str(_first(item, "serving", "portion", "serving_note")),
        sources=[str(s) for s in source] if source else None,
    )


def _entry_from_wrapped_item(item: Dict) -> Optional[FodmapEntry]:
    """Entry from the ``{"list": [...]}`` layout."""
    name = _first(item, "name", "food")
    if not name:
        return None
    sources = item.get("sources")
    return FodmapEntry(
        name=str(name),
        group=_as_str(_first(item, "group", "category")),
        category=_as_str(item.get("category")),
        rating=map_repo_rating(_first(item, "rating", "rank", "status")),
        details=_as_str(_first(item, "details", "notes")),
        serving_note=_as_str(_first(item, "serving", "portion")),
        sources=[str(s) for s in sources] if isinstance(sources, list) else None,
    )


def parse_dataset(raw: Any) -> List[FodmapEntry]:
    """Extract entries from either dataset layout; unknown shapes give []."""
    if isinstance(raw, list):
        items, build = raw, _entry_from_list_item
    elif isinstance(raw, dict):
        items = _first(raw, "list", "items", "foods") or []
        build = _entry_from_wrapped_item
        if not isinstance(items, list):
            return []
    else:
        return []

    entries = []
    for item in items:
        if not isinstance(item, dict):
            continue
        entry = build(item)
        if entry is not None:
            entries.append(entry)
    return entries


def rate_ingredient(name: str, dataset: FodmapDataset) -> IngredientRating:
    """
    Rate one ingredient against the dataset.

    An exact normalized match wins immediately. Otherwise the entry with the
    longest containment overlap (either direction) is used; ties keep the
    earliest entry.
    """
    normalized = normalize_ingredient_name(name)
    best: Optional[FodmapEntry] = None
    best_score = -1

    if normalized:
        for entry in dataset.entries:
            entry_name = normalize_ingredient_name(entry.name)
            if not entry_name:
                continue
            if normalized == entry_name:
                return IngredientRating(ingredient=name, rating=entry.rating, match=entry)
            if entry_name in normalized or normalized in entry_name:
                score = min(len(normalized), len(entry_name))
                if score > best_score:
                    best, best_score = entry, score

    if best is not None:
        return IngredientRating(ingredient=name, rating=best.rating, match=best)
    return IngredientRating(ingredient=name, rating=FodmapRating.UNKNOWN)


class FodmapDatasetService:
    """
    Downloads and caches the FODMAP dataset.

    Attributes:
        url: Dataset location
        cache_path: On-disk cache file, or None to skip disk caching
        timeout: Request timeout in seconds
        max_retries: Retry attempts after the first failed request
        retry_delay: Base backoff delay in seconds
    """

    def __init__(
        self,
        url: Optional[str] = None,
        cache_path: Optional[Union[str, Path]] = None,
        timeout: Optional[int] = None,
        max_retries: int = 2,
        retry_delay: float = 1.0,
    ):
        self.url = url or settings.FODMAP_DATASET_URL
        cache = cache_path if cache_path is not None else settings.FODMAP_CACHE_PATH
        self.cache_path = Path(cache) if cache else None
        self.timeout = timeout or settings.API_TIMEOUT
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._dataset: Optional[FodmapDataset] = None

        logger.info(f"FODMAP dataset service initialized with URL: {self.url}")

    def fetch_dataset(self, force_refresh: bool = False) -> FodmapDataset:
        """
        Return the dataset, downloading it if not cached.

        Args:
            force_refresh: Skip both caches and download again

        Returns:
            FodmapDataset: Possibly empty, never None
        """
        if not force_refresh:
            if self._dataset is not None:
                return self._dataset
            cached = self._read_cache()
            if cached is not None:
                self._dataset = cached
                return cached

        raw = self._download()
        if raw is None:
            return FodmapDataset(entries=[], fetched_at=to_iso(utc_now()))

        dataset = FodmapDataset(entries=parse_dataset(raw), fetched_at=to_iso(utc_now()))
        logger.info(f"FODMAP dataset loaded with {len(dataset.entries)} entries")
        self._dataset = dataset
        self._write_cache(dataset)
        return dataset

    def rate_ingredients(self, names: List[str], force_refresh: bool = False) -> List[IngredientRating]:
        dataset = self.fetch_dataset(force_refresh)
        return [rate_ingredient(name, dataset) for name in names]

    def _download(self, retry_count: int = 0) -> Optional[Any]:
        """GET the dataset JSON with exponential backoff; None on failure."""
        try:
            logger.info(f"Downloading FODMAP dataset from {self.url}")
            response = requests.get(
                self.url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            return response.json()

        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            logger.warning(f"FODMAP dataset download failed ({type(e).__name__})")
            if retry_count < self.max_retries:
                wait_time = self.retry_delay * (2 ** retry_count)
                logger.info(
                    f"Retrying dataset download (attempt {retry_count + 1}/{self.max_retries}) "
                    f"after {wait_time}s"
                )
                time.sleep(wait_time)
                return self._download(retry_count + 1)
            logger.error(f"Max retries ({self.max_retries}) exceeded for FODMAP dataset")
            return None

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch FODMAP dataset: {e}")
            return None

        except ValueError as e:
            logger.error(f"Failed to parse FODMAP dataset JSON: {e}")
            return None

    def _read_cache(self) -> Optional[FodmapDataset]:
        if self.cache_path is None or not self.cache_path.exists():
            return None
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                return FodmapDataset.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable FODMAP cache {self.cache_path}: {e}")
            return None

    def _write_cache(self, dataset: FodmapDataset) -> None:
        if self.cache_path is None:
            return
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, "w", encoding="utf-8") as f:
                json.dump(dataset.model_dump(mode="json"), f)
        except OSError as e:
            logger.warning(f"Could not write FODMAP cache {self.cache_path}: {e}")
