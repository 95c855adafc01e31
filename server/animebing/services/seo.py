"""SEO metadata generated for catalog entries that arrive without it."""

from typing import Optional

from .slugs import generate_slug

SITE_NAME = "AnimeBing"

PLATFORM_KEYWORDS = [
    "animebing",
    "animebing.in",
    "anime streaming site",
    "free anime downloads",
]

# Keyword templates per audio/subtitle flavour; "{title}" is filled in
LANGUAGE_KEYWORDS = {
    "hindi dub": [
        "hindi dubbed anime",
        "anime in hindi",
        "hindi dub",
        "{title} hindi dubbed",
        "watch anime in hindi",
    ],
    "hindi sub": [
        "hindi subbed anime",
        "anime with hindi subtitles",
        "hindi sub",
        "{title} hindi subbed",
        "hindi subtitles anime",
    ],
    "english sub": [
        "english subbed anime",
        "anime in english",
        "english sub",
        "{title} english sub",
        "english subtitles anime",
    ],
}

CONTENT_TYPE_KEYWORDS = {
    "Movie": [
        "{title} movie",
        "watch {title} movie online",
        "{title} anime movie",
        "anime movies",
        "full anime movie",
    ],
    "Manga": [
        "{title} manga",
        "read {title} manga online",
        "{title} manga chapters",
        "read manga online",
        "manga in hindi",
    ],
    "Anime": [
        "{title} episodes",
        "watch {title} episodes",
        "{title} all episodes",
        "anime episodes",
        "hindi dubbed episodes",
    ],
}


def seo_title(title: str, sub_dub_status: str) -> str:
    return f"Watch {title} Online in {sub_dub_status} | {SITE_NAME}"


def seo_description(title: str, sub_dub_status: str, content_type: str) -> str:
    if content_type == "Movie":
        content_text = "Full movie available"
    elif content_type == "Manga":
        content_text = "Read manga online"
    else:
        content_text = "All episodes available"
    return (
        f"Watch {title} online in {sub_dub_status}. {content_text} in HD quality. "
        f"Free streaming and downloads on {SITE_NAME}."
    )


def seo_keywords(
    title: str,
    genres: Optional[list[str]],
    sub_dub_status: str,
    content_type: str,
) -> str:
    """Comma-separated keyword list, de-duplicated in first-seen order."""
    keywords = [
        f"{title} anime",
        f"watch {title} online",
        f"{title} {sub_dub_status.lower()}",
        f"{title} free download",
    ]

    for genre in genres or []:
        genre = genre.lower()
        keywords.extend([
            f"{title} {genre} anime",
            f"{genre} anime",
            f"{genre} anime in hindi",
        ])

    statuses = [s.strip() for s in sub_dub_status.lower().split(",")]
    for status, templates in LANGUAGE_KEYWORDS.items():
        if status in statuses:
            keywords.extend(t.format(title=title) for t in templates)

    templates = CONTENT_TYPE_KEYWORDS.get(content_type, CONTENT_TYPE_KEYWORDS["Anime"])
    keywords.extend(t.format(title=title) for t in templates)
    keywords.extend(PLATFORM_KEYWORDS)

    return ", ".join(dict.fromkeys(keywords))


def fill_seo_fields(entry: dict) -> dict:
    """Populate missing slug and SEO fields on a new entry in place."""
    title = entry.get("title", "")
    if not title.strip():
        return entry

    sub_dub = entry.get("subDubStatus") or "Hindi Sub"
    content_type = entry.get("contentType") or "Anime"

    if not (entry.get("slug") or "").strip():
        entry["slug"] = generate_slug(title)
    if not (entry.get("seoTitle") or "").strip():
        entry["seoTitle"] = seo_title(title, sub_dub)
    if not (entry.get("seoDescription") or "").strip():
        entry["seoDescription"] = seo_description(title, sub_dub, content_type)
    if not (entry.get("seoKeywords") or "").strip():
        entry["seoKeywords"] = seo_keywords(title, entry.get("genreList"), sub_dub, content_type)
    return entry
