"""Document store for the catalog and everything hanging off it.

Collections are plain dicts of JSON-ready documents keyed by id, so routers
can return them directly. When a data file is configured every mutation is
flushed to it and the file is read back on startup.
"""

import json
import logging
import math
from datetime import datetime
from pathlib import Path
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional

from ..config import get_settings
from .slugs import new_object_id

logger = logging.getLogger(__name__)

CONTENT_TYPES = ("Anime", "Movie", "Manga")
SUB_DUB_STATUSES = (
    "Hindi Dub", "Hindi Sub", "English Sub", "Both",
    "Subbed", "Dubbed", "Sub & Dub", "Dual Audio",
)
ENTRY_STATUSES = ("Ongoing", "Complete")
REPORT_STATUSES = ("Pending", "In Progress", "Fixed")
SOCIAL_PLATFORMS = ("facebook", "instagram", "telegram", "twitter", "youtube", "whatsapp", "discord")

# Fields returned by listing/search when no selector is given
LISTING_FIELDS = (
    "title", "slug", "thumbnail", "releaseYear", "subDubStatus",
    "contentType", "updatedAt", "createdAt",
)
FEATURED_FIELDS = LISTING_FIELDS + ("bannerImage", "rating", "featuredOrder")
FEATURED_LIMIT = 10

DEFAULT_SOCIAL_LINKS = [
    {"platform": "facebook", "url": "https://facebook.com/animebing", "isActive": True},
    {"platform": "instagram", "url": "https://instagram.com/animebing", "isActive": True},
    {"platform": "telegram", "url": "https://t.me/animebing", "isActive": True},
    {"platform": "twitter", "url": "https://twitter.com/animebing", "isActive": False},
    {"platform": "youtube", "url": "https://youtube.com/c/animebing", "isActive": False, "displayName": "YouTube"},
]

DEFAULT_AD_SLOTS = [
    {"name": "Header Banner", "position": "header"},
    {"name": "Sidebar", "position": "sidebar"},
    {"name": "In-Content", "position": "in-content"},
    {"name": "Download Page", "position": "download"},
    {"name": "Footer Banner", "position": "footer"},
]

COLLECTIONS = ("anime", "episodes", "chapters", "reports", "social", "adSlots")


class StoreError(Exception):
    """Base class for document store errors."""


class DocumentNotFound(StoreError):
    """Raised when a document id does not exist in a collection."""

    def __init__(self, collection: str, doc_id: Any):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection} document {doc_id!r} not found")


class DuplicateDocument(StoreError):
    """Raised when a write would break a uniqueness rule."""


def _utcnow() -> str:
    return datetime.utcnow().isoformat()


def project(doc: dict, fields: Optional[Iterable[str]]) -> dict:
    """Return ``doc`` narrowed to ``fields``; ids are always kept."""
    if fields is None:
        return dict(doc)
    keep = set(fields) | {"id", "_id"}
    return {k: v for k, v in doc.items() if k in keep}


def parse_fields(fields: Optional[str]) -> Optional[list[str]]:
    """Parse a ``fields`` query value ("title,thumbnail" or "title thumbnail")."""
    if not fields:
        return None
    parsed = [f for f in fields.replace(",", " ").split() if f]
    return parsed or None


def paginate(items: list, page: int, limit: int) -> tuple[list, dict]:
    """Slice ``items`` and build the pagination block used by list endpoints."""
    total = len(items)
    page = max(page, 1)
    limit = max(limit, 1)
    total_pages = math.ceil(total / limit)
    start = (page - 1) * limit
    return items[start:start + limit], {
        "current": page,
        "totalPages": total_pages,
        "hasMore": page < total_pages,
        "totalItems": total,
    }


class CatalogStore:
    """In-memory document collections with optional JSON file persistence."""

    def __init__(self, data_path: Optional[Path] = None, clock: Callable[[], str] = _utcnow):
        self.data_path = data_path
        self._clock = clock
        self._data: dict[str, dict[str, dict]] = {name: {} for name in COLLECTIONS}
        # Write counter; breaks updatedAt ties so the latest write sorts first
        self._revision = 0
        self._revisions: dict[str, int] = {}

        if data_path is not None and data_path.exists():
            self.load()
        if not self._data["social"]:
            self.init_default_social_links()

    # --- Persistence ---

    def load(self) -> None:
        """Read every collection from the data file."""
        with open(self.data_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        for name in COLLECTIONS:
            docs = raw.get(name, [])
            self._data[name] = {self._key(name, d): d for d in docs}
        for doc_id in self._data["anime"]:
            self._bump(doc_id)
        logger.info("Loaded catalog from %s (%d entries)", self.data_path, len(self._data["anime"]))

    def save(self) -> None:
        """Write every collection to the data file, if one is configured."""
        if self.data_path is None:
            return
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {name: list(docs.values()) for name, docs in self._data.items()}
        tmp_path = self.data_path.with_suffix(self.data_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        tmp_path.replace(self.data_path)

    @staticmethod
    def _key(collection: str, doc: dict) -> str:
        return doc["platform"] if collection == "social" else doc["id"]

    def _bump(self, doc_id: str) -> None:
        self._revision += 1
        self._revisions[doc_id] = self._revision

    def _new_doc(self, fields: dict) -> dict:
        doc_id = new_object_id()
        now = self._clock()
        return {"id": doc_id, "_id": doc_id, **fields, "createdAt": now, "updatedAt": now}

    def _require(self, collection: str, doc_id: str) -> dict:
        doc = self._data[collection].get(doc_id)
        if doc is None:
            raise DocumentNotFound(collection, doc_id)
        return doc

    # --- Catalog entries ---

    def _sorted_entries(self, predicate: Optional[Callable[[dict], bool]] = None) -> list[dict]:
        entries = [e for e in self._data["anime"].values() if predicate is None or predicate(e)]
        entries.sort(
            key=lambda e: (e.get("updatedAt") or "", self._revisions.get(e["id"], 0)),
            reverse=True,
        )
        return entries

    def list_entries(self, page: int = 1, limit: int = 24, fields: Optional[list[str]] = None) -> tuple[list[dict], dict]:
        """Page through all entries, most recently updated first."""
        items, pagination = paginate(self._sorted_entries(), page, limit)
        return [project(e, fields or LISTING_FIELDS) for e in items], pagination

    def search_entries(
        self,
        query: str,
        page: int = 1,
        limit: int = 24,
        fields: Optional[list[str]] = None,
    ) -> tuple[list[dict], dict]:
        """Case-insensitive substring match on title."""
        needle = (query or "").lower()
        matches = self._sorted_entries(lambda e: needle in e.get("title", "").lower())
        items, pagination = paginate(matches, page, limit)
        return [project(e, fields or LISTING_FIELDS) for e in items], pagination

    def featured_entries(self, limit: int = FEATURED_LIMIT) -> list[dict]:
        featured = [e for e in self._data["anime"].values() if e.get("featured")]
        featured.sort(key=lambda e: e.get("createdAt") or "", reverse=True)
        featured.sort(key=lambda e: e.get("featuredOrder") or 0, reverse=True)
        return [project(e, FEATURED_FIELDS) for e in featured[:limit]]

    def filter_entries(self, status: Optional[str] = None, content_type: Optional[str] = None) -> list[dict]:
        """Admin listing, newest first, with episodes embedded."""
        def matches(entry: dict) -> bool:
            if status and status != "All" and entry.get("status") != status:
                return False
            if content_type and content_type != "All" and entry.get("contentType") != content_type:
                return False
            return True

        entries = [e for e in self._data["anime"].values() if matches(e)]
        entries.sort(key=lambda e: e.get("createdAt") or "", reverse=True)
        return [self.with_children(e) for e in entries]

    def get_entry(self, entry_id: str) -> Optional[dict]:
        entry = self._data["anime"].get(entry_id)
        return dict(entry) if entry else None

    def get_entry_by_slug(self, slug: str) -> Optional[dict]:
        for entry in self._data["anime"].values():
            if entry.get("slug") == slug:
                return dict(entry)
        return None

    def with_children(self, entry: dict) -> dict:
        """Copy of ``entry`` with its episodes (and chapters for manga) embedded."""
        result = dict(entry)
        result["episodes"] = self.episodes_for(entry["id"])
        if entry.get("contentType") == "Manga":
            result["chapters"] = self.chapters_for(entry["id"])
        return result

    def add_entry(self, fields: dict) -> dict:
        """Insert a new entry; titles must be unique."""
        title = fields.get("title")
        if any(e.get("title") == title for e in self._data["anime"].values()):
            raise DuplicateDocument("Anime/Movie already exists")

        doc = self._new_doc({
            "status": "Ongoing",
            "contentType": "Anime",
            "subDubStatus": "Hindi Sub",
            "genreList": [],
            "featured": False,
            "featuredOrder": 0,
            "reportCount": 0,
            **{k: v for k, v in fields.items() if v is not None},
        })
        self._data["anime"][doc["id"]] = doc
        self._bump(doc["id"])
        self.save()
        logger.info("Added %s %r (%s)", doc["contentType"], doc["title"], doc["id"])
        return dict(doc)

    def update_entry(self, entry_id: str, changes: dict) -> dict:
        entry = self._require("anime", entry_id)
        changes = {k: v for k, v in changes.items() if k not in ("id", "_id", "createdAt")}
        entry.update(changes)
        entry["updatedAt"] = self._clock()
        self._bump(entry_id)
        self.save()
        return dict(entry)

    def touch_entry(self, entry_id: str) -> None:
        """Mark an entry as freshly updated so it sorts first in listings."""
        entry = self._data["anime"].get(entry_id)
        if entry is None:
            return
        entry["updatedAt"] = self._clock()
        self._bump(entry_id)

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry together with its episodes, chapters and reports."""
        self._data["anime"].pop(entry_id, None)
        self._revisions.pop(entry_id, None)
        for collection, parent_field in (("episodes", "animeId"), ("chapters", "mangaId"), ("reports", "animeId")):
            docs = self._data[collection]
            for doc_id in [d["id"] for d in docs.values() if d.get(parent_field) == entry_id]:
                del docs[doc_id]
        self.save()
        logger.info("Deleted entry %s and its children", entry_id)

    def set_featured(self, entry_id: str, featured: bool) -> dict:
        entry = self._require("anime", entry_id)
        if featured:
            count = sum(1 for e in self._data["anime"].values() if e.get("featured"))
            entry["featured"] = True
            entry["featuredOrder"] = count + 1
        else:
            entry["featured"] = False
            entry["featuredOrder"] = 0
        self.save()
        return dict(entry)

    def reorder_featured(self, ordered_ids: list[str]) -> int:
        """Assign featuredOrder 1..n following ``ordered_ids``; unknown ids are skipped."""
        updated = 0
        for index, entry_id in enumerate(ordered_ids):
            entry = self._data["anime"].get(entry_id)
            if entry is None:
                continue
            entry["featured"] = True
            entry["featuredOrder"] = index + 1
            updated += 1
        self.save()
        return updated

    # --- Episodes and chapters ---

    def episodes_for(self, anime_id: str) -> list[dict]:
        episodes = [dict(e) for e in self._data["episodes"].values() if e.get("animeId") == anime_id]
        episodes.sort(key=lambda e: (e.get("session", 1), e.get("episodeNumber", 0)))
        return episodes

    def get_episode(self, episode_id: str) -> Optional[dict]:
        episode = self._data["episodes"].get(episode_id)
        return dict(episode) if episode else None

    def add_episode(self, fields: dict) -> dict:
        anime_id = fields["animeId"]
        self._require("anime", anime_id)
        number = fields["episodeNumber"]
        session = fields.get("session") or 1
        for existing in self._data["episodes"].values():
            if (existing["animeId"], existing["episodeNumber"], existing.get("session", 1)) == (anime_id, number, session):
                raise DuplicateDocument(f"Episode {number} already exists in Session {session}")

        doc = self._new_doc({
            "animeId": anime_id,
            "title": fields.get("title") or f"Episode {number}",
            "episodeNumber": number,
            "session": session,
            "secureFileReference": fields.get("secureFileReference"),
            "downloadLinks": fields.get("downloadLinks") or [],
        })
        self._data["episodes"][doc["id"]] = doc
        self.touch_entry(anime_id)
        self.save()
        return dict(doc)

    def update_episode(self, episode_id: str, changes: dict) -> dict:
        episode = self._require("episodes", episode_id)
        episode.update(changes)
        episode["updatedAt"] = self._clock()
        self.touch_entry(episode["animeId"])
        self.save()
        return dict(episode)

    def delete_episode(self, episode_id: str) -> None:
        episode = self._require("episodes", episode_id)
        del self._data["episodes"][episode_id]
        self.touch_entry(episode["animeId"])
        self.save()

    def all_chapters(self) -> list[dict]:
        chapters = [dict(c) for c in self._data["chapters"].values()]
        chapters.sort(key=lambda c: (c.get("session", 1), c.get("chapterNumber", 0)))
        return chapters

    def chapters_for(self, manga_id: str) -> list[dict]:
        return [c for c in self.all_chapters() if c.get("mangaId") == manga_id]

    def get_chapter(self, chapter_id: str) -> Optional[dict]:
        chapter = self._data["chapters"].get(chapter_id)
        return dict(chapter) if chapter else None

    def _find_chapter(self, manga_id: str, number: float, session: int) -> Optional[dict]:
        for chapter in self._data["chapters"].values():
            if (chapter["mangaId"], chapter["chapterNumber"], chapter.get("session", 1)) == (manga_id, number, session):
                return chapter
        return None

    def add_chapter(self, fields: dict) -> dict:
        manga_id = fields["mangaId"]
        self._require("anime", manga_id)
        number = fields["chapterNumber"]
        session = fields.get("session") or 1
        if self._find_chapter(manga_id, number, session) is not None:
            raise DuplicateDocument(f"Chapter {number} already exists in Session {session}")

        doc = self._new_doc({
            "mangaId": manga_id,
            "title": fields.get("title") or f"Chapter {number}",
            "chapterNumber": number,
            "session": session,
            "secureFileReference": fields.get("secureFileReference"),
            "cutyLink": fields.get("cutyLink") or "",
            "downloadLinks": fields.get("downloadLinks") or [],
        })
        self._data["chapters"][doc["id"]] = doc
        self.touch_entry(manga_id)
        self.save()
        return dict(doc)

    def update_chapter(self, chapter_id: str, changes: dict) -> dict:
        chapter = self._require("chapters", chapter_id)
        chapter.update(changes)
        chapter["updatedAt"] = self._clock()
        self.touch_entry(chapter["mangaId"])
        self.save()
        return dict(chapter)

    def update_chapter_by_number(self, manga_id: str, number: float, session: int, changes: dict) -> dict:
        self._require("anime", manga_id)
        chapter = self._find_chapter(manga_id, number, session)
        if chapter is None:
            raise DocumentNotFound("chapters", f"{manga_id}#{session}.{number}")
        return self.update_chapter(chapter["id"], changes)

    def delete_chapter_by_number(self, manga_id: str, number: float, session: int) -> None:
        chapter = self._find_chapter(manga_id, number, session)
        if chapter is None:
            raise DocumentNotFound("chapters", f"{manga_id}#{session}.{number}")
        del self._data["chapters"][chapter["id"]]
        self.touch_entry(manga_id)
        self.save()

    # --- Reports ---

    def list_reports(self) -> list[dict]:
        reports = []
        for report in self._data["reports"].values():
            report = dict(report)
            entry = self._data["anime"].get(report.get("animeId"))
            report["anime"] = (
                {"id": entry["id"], "title": entry.get("title"), "thumbnail": entry.get("thumbnail")}
                if entry else None
            )
            reports.append(report)
        reports.sort(key=lambda r: r.get("createdAt") or "", reverse=True)
        return reports

    def add_report(self, fields: dict) -> dict:
        entry = self._require("anime", fields["animeId"])
        doc = self._new_doc({"status": "Pending", **fields})
        self._data["reports"][doc["id"]] = doc
        entry["reportCount"] = entry.get("reportCount", 0) + 1
        entry["lastReported"] = doc["createdAt"]
        self.save()
        return dict(doc)

    def update_report(self, report_id: str, status: str, admin_response: Optional[str] = None) -> dict:
        report = self._require("reports", report_id)
        now = self._clock()
        report["status"] = status
        if admin_response:
            report["adminResponse"] = admin_response
            report["responseDate"] = now
        if status == "Fixed":
            report["resolvedAt"] = now
        report["updatedAt"] = now
        self.save()
        return dict(report)

    def delete_report(self, report_id: str) -> None:
        self._require("reports", report_id)
        del self._data["reports"][report_id]
        self.save()

    def bulk_delete_reports(self, report_ids: list[str]) -> int:
        removed = 0
        for report_id in report_ids:
            if self._data["reports"].pop(report_id, None) is not None:
                removed += 1
        self.save()
        return removed

    # --- Social links ---

    def init_default_social_links(self) -> None:
        """Create any default platform link that does not exist yet."""
        for link in DEFAULT_SOCIAL_LINKS:
            if link["platform"] not in self._data["social"]:
                self.upsert_social_link(link["platform"], link["url"], link["isActive"], link.get("displayName"))
        logger.info("Social media links initialized")

    def social_links(self, active_only: bool = False) -> list[dict]:
        links = [dict(s) for s in self._data["social"].values() if s.get("isActive") or not active_only]
        links.sort(key=lambda s: s["platform"])
        return links

    def upsert_social_link(
        self,
        platform: str,
        url: str,
        is_active: bool = True,
        display_name: Optional[str] = None,
    ) -> dict:
        platform = platform.lower()
        if platform not in SOCIAL_PLATFORMS:
            raise StoreError(f"Unsupported platform: {platform}")
        if not url.startswith(("http://", "https://")):
            raise StoreError("URL must start with http:// or https://")

        now = self._clock()
        link = self._data["social"].get(platform)
        if link is None:
            link = {
                "id": new_object_id(),
                "platform": platform,
                "icon": platform,
                "displayName": display_name or platform.capitalize(),
                "createdAt": now,
            }
            self._data["social"][platform] = link
        elif display_name:
            link["displayName"] = display_name
        link["url"] = url
        link["isActive"] = is_active
        link["updatedAt"] = now
        self.save()
        return dict(link)

    # --- Ad slots ---

    def ad_slots(self) -> list[dict]:
        """All ad slots; the default set is created on first use."""
        if not self._data["adSlots"]:
            for slot in DEFAULT_AD_SLOTS:
                doc = self._new_doc({
                    **slot,
                    "adCode": "",
                    "isActive": False,
                    "impressions": 0,
                    "clicks": 0,
                    "earnings": 0.0,
                })
                self._data["adSlots"][doc["id"]] = doc
            self.save()
            logger.info("Created %d default ad slots", len(DEFAULT_AD_SLOTS))
        return [dict(s) for s in self._data["adSlots"].values()]

    def update_ad_slot(self, slot_id: str, changes: dict) -> dict:
        slot = self._require("adSlots", slot_id)
        slot.update(changes)
        slot["updatedAt"] = self._clock()
        self.save()
        return dict(slot)

    def record_impression(self, slot_id: str) -> dict:
        slot = self._require("adSlots", slot_id)
        slot["impressions"] = slot.get("impressions", 0) + 1
        self.save()
        return dict(slot)

    def record_click(self, slot_id: str, earnings: float) -> dict:
        slot = self._require("adSlots", slot_id)
        slot["clicks"] = slot.get("clicks", 0) + 1
        slot["impressions"] = slot.get("impressions", 0) + 1
        slot["earnings"] = slot.get("earnings", 0.0) + earnings
        self.save()
        return dict(slot)

    # --- Counts ---

    def counts(self) -> dict:
        entries = self._data["anime"].values()
        return {
            "totalAnimes": sum(1 for e in entries if e.get("contentType") == "Anime"),
            "totalMovies": sum(1 for e in entries if e.get("contentType") == "Movie"),
            "totalManga": sum(1 for e in entries if e.get("contentType") == "Manga"),
            "totalEpisodes": len(self._data["episodes"]),
            "totalChapters": len(self._data["chapters"]),
            "totalReports": len(self._data["reports"]),
            "pendingReports": sum(1 for r in self._data["reports"].values() if r.get("status") == "Pending"),
        }


@lru_cache()
def get_store() -> CatalogStore:
    """Get the process-wide store, backed by the configured data file."""
    return CatalogStore(get_settings().data_path)
