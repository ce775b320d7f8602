"""Social handle extraction from token link URLs.

Each extractor returns a normalized handle or the ``NOT_FOUND`` sentinel.
"""

import re
from urllib.parse import urlparse

from solcheck.models.records import (
    NOT_FOUND,
    DiscordInfo,
    GithubInfo,
    SocialRecord,
    TelegramInfo,
    TwitterInfo,
    WebsiteInfo,
)

_TWITTER_RE = re.compile(
    r"^(?:https?://)?(?:www\.|mobile\.)?(?:twitter|x)\.com/(?:#!/)?@?([A-Za-z0-9_]{1,15})(?:[/?#].*)?$",
    re.IGNORECASE,
)
_TWITTER_RESERVED = {"home", "i", "intent", "search", "share", "hashtag", "explore", "settings"}

_TELEGRAM_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?(?:t\.me|telegram\.me)/(?:s/)?([A-Za-z0-9_]{4,32})(?:[/?#].*)?$",
    re.IGNORECASE,
)
_TELEGRAM_RESERVED = {"joinchat", "share", "addstickers"}

# discord.gg/<code> or discord.com/invite/<code> (discordapp.com too)
_DISCORD_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?(?:discord\.gg/|discord(?:app)?\.com/invite/)([A-Za-z0-9-]{2,32})/?(?:[?#].*)?$",
    re.IGNORECASE,
)

_GITHUB_PROFILE_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/([A-Za-z0-9](?:[A-Za-z0-9-]{0,38}))/?(?:[?#].*)?$",
    re.IGNORECASE,
)
_GITHUB_REPO_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/([A-Za-z0-9](?:[A-Za-z0-9-]{0,38}))/([A-Za-z0-9_.-]+?)(?:\.git)?/?(?:[/?#].*)?$",
    re.IGNORECASE,
)


def extract_twitter(url: str) -> str:
    match = _TWITTER_RE.match((url or "").strip())
    if not match or match.group(1).lower() in _TWITTER_RESERVED:
        return NOT_FOUND
    return f"@{match.group(1)}"


def extract_telegram(url: str) -> str:
    match = _TELEGRAM_RE.match((url or "").strip())
    if not match or match.group(1).lower() in _TELEGRAM_RESERVED:
        return NOT_FOUND
    return f"@{match.group(1)}"


def extract_discord(url: str) -> str:
    match = _DISCORD_RE.match((url or "").strip())
    if not match:
        return NOT_FOUND
    return f"discord.gg/{match.group(1)}"


def extract_github_profile(url: str) -> str:
    match = _GITHUB_PROFILE_RE.match((url or "").strip())
    return f"@{match.group(1)}" if match else NOT_FOUND


def extract_github_org(url: str) -> str:
    """Org/user owning a repository URL (github.com/<org>/<repo>)."""
    match = _GITHUB_REPO_RE.match((url or "").strip())
    return f"@{match.group(1)}" if match else NOT_FOUND


def extract_github_repo(url: str) -> str:
    match = _GITHUB_REPO_RE.match((url or "").strip())
    return f"{match.group(1)}/{match.group(2)}" if match else NOT_FOUND


def extract_domain(url: str) -> str:
    """Registrable host of a website URL, without ``www.``."""
    url = (url or "").strip()
    if not url:
        return ""
    if not url.lower().startswith(("http://", "https://")):
        url = f"https://{url}"
    host = (urlparse(url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host if "." in host else ""


def build_social(links: list[tuple[str, str]], website: WebsiteInfo | None = None) -> SocialRecord:
    """Assemble a SocialRecord from ``(kind, url)`` pairs.

    ``kind`` is a hint ("twitter", "telegram", "website", ...) but every URL is
    matched against every pattern; the first match per network wins.
    """
    twitter, telegram, discord, github = TwitterInfo(), TelegramInfo(), DiscordInfo(), GithubInfo()
    website_url = NOT_FOUND

    for kind, url in links:
        handle = extract_twitter(url)
        if handle != NOT_FOUND:
            if twitter.handle == NOT_FOUND:
                twitter = TwitterInfo(handle=handle, url=url)
            continue
        channel = extract_telegram(url)
        if channel != NOT_FOUND:
            if telegram.channel == NOT_FOUND:
                telegram = TelegramInfo(channel=channel, url=url)
            continue
        invite = extract_discord(url)
        if invite != NOT_FOUND:
            if discord.invite == NOT_FOUND:
                discord = DiscordInfo(invite=invite, url=url)
            continue
        if "github.com" in url.lower():
            repo = extract_github_repo(url)
            org = extract_github_org(url) if repo != NOT_FOUND else extract_github_profile(url)
            if github.org == NOT_FOUND and org != NOT_FOUND:
                github = GithubInfo(repo=repo, org=org, url=url)
            continue
        if website_url == NOT_FOUND and kind == "website" and extract_domain(url):
            website_url = url

    if website is None:
        website = WebsiteInfo()
    if website.url == NOT_FOUND and website_url != NOT_FOUND:
        website = website.model_copy(update={"url": website_url, "domain": extract_domain(website_url)})

    return SocialRecord(
        available=bool(links),
        website=website,
        twitter=twitter,
        telegram=telegram,
        discord=discord,
        github=github,
    )
