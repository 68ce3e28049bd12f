"""DramaCool catalog provider."""

import logging
import re
from typing import List, Optional

import niquests
from bs4 import BeautifulSoup, Tag

from reelbridge.core.errors import (
    CatalogFetchError,
    ServerNotFoundError,
    UnsupportedServerError,
)
from reelbridge.extractors import StreamingServer, build_extractors, parse_server
from reelbridge.models.catalog import (
    CatalogCandidate,
    CatalogEpisode,
    CatalogMediaInfo,
    CatalogSearchPage,
    Character,
    EpisodeServer,
    MediaStatus,
    StreamSources,
)
from reelbridge.models.media import MediaType, Trailer
from reelbridge.providers.base import CatalogProvider, ProviderConfig, create_session

logger = logging.getLogger(__name__)

DOWNLOAD_LINK_PATTERN = re.compile(r"^(https://[^/]+)/[^?]+(\?.+)$")


class DramaCoolProvider(CatalogProvider):
    """Scrapes the DramaCool site.

    Media ids are site paths without the leading slash or ``.html`` suffix,
    e.g. ``drama-detail/vincenzo``. Episode ids look the same
    (``vincenzo-2021-episode-1``); episode numbers come from the
    ``-episode-<n>`` suffix, where ``7-5`` means special episode 7.5.
    """

    def __init__(self, config: ProviderConfig | None = None):
        self.config = config or ProviderConfig.from_settings()
        self.base_url = self.config.base_url.rstrip("/")
        self._owns_session = self.config.session is None
        self.session = self.config.session or create_session(self.config)
        self.extractors = build_extractors(self.session, self.config.timeout)

    @property
    def name(self) -> str:
        return "DramaCool"

    async def aclose(self) -> None:
        """Properly close the internal HTTP session."""
        if self._owns_session and self.session:
            await self.session.close()

    async def _get(self, url: str) -> str:
        """GET a page and return its HTML."""
        try:
            response = await self.session.get(url, timeout=self.config.timeout)
            response.raise_for_status()
        except niquests.exceptions.RequestException as exc:
            logger.error(f"Error requesting {url}: {exc}")
            raise CatalogFetchError(f"Failed to fetch {url}", exc) from exc
        return response.text or ""

    # --- Search & listings ---

    async def search(self, query: str, page: int = 1) -> CatalogSearchPage:
        keyword = re.sub(r"[\W_]+", "-", query)
        html = await self._get(f"{self.base_url}/search?keyword={keyword}&page={page}")
        soup = BeautifulSoup(html, "html.parser")

        result = self._pagination(soup, page)
        for item in soup.select(
            "div.block > div.tab-content > ul.list-episode-item > li"
        ):
            link = self._attr(item.find("a"), "href")
            title = self._text(item.select_one("h3.title"))
            if not link or not title:
                continue
            result.results.append(
                CatalogCandidate(
                    id=link[1:].replace(".html", ""),
                    title=title,
                    url=f"{self.base_url}{link}",
                    image=self._attr(item.find("img"), "data-original"),
                    # The site lists dramas; single-season shows count as series
                    type=MediaType.SERIES,
                )
            )

        logger.debug(f"{self.name}: {len(result.results)} results for '{query}'")
        return result

    async def fetch_popular(self, page: int = 1) -> CatalogSearchPage:
        """List the most popular dramas."""
        html = await self._get(f"{self.base_url}/most-popular-drama?page={page}")
        return self._parse_view_page(html, page)

    async def fetch_recent_tv_shows(self, page: int = 1) -> CatalogSearchPage:
        """List recently added episodes, one entry per show."""
        html = await self._get(f"{self.base_url}/recently-added?page={page}")
        return self._parse_view_page(html, page, is_tv_show=True)

    async def fetch_recent_movies(self, page: int = 1) -> CatalogSearchPage:
        """List recently added movies."""
        html = await self._get(f"{self.base_url}/recently-added-movie?page={page}")
        return self._parse_view_page(html, page, is_movie=True)

    def _parse_view_page(
        self, html: str, page: int, is_tv_show: bool = False, is_movie: bool = False
    ) -> CatalogSearchPage:
        soup = BeautifulSoup(html, "html.parser")
        result = self._pagination(soup, page)

        for item in soup.select("ul.list-episode-item > li"):
            link = self._attr(item.find("a"), "href")
            title = self._text(item.select_one("h3.title"))
            if not link or not title:
                continue

            episode_number = None
            if is_tv_show:
                media_id = link.split("-episode-")[0][1:]
                ep_match = re.search(r"EP (\d+)", self._text(item.select_one("span.ep")))
                if ep_match:
                    episode_number = int(ep_match.group(1))
            else:
                media_id = link[1:].replace(".html", "")

            result.results.append(
                CatalogCandidate(
                    id=media_id,
                    title=title,
                    url=f"{self.base_url}{link}",
                    image=self._attr(item.find("img"), "data-original"),
                    release_date=self._text(item.select_one("span.time")) or None,
                    type=MediaType.MOVIE if is_movie else MediaType.SERIES,
                    episode_number=episode_number,
                )
            )

        return result

    def _pagination(self, soup: BeautifulSoup, page: int) -> CatalogSearchPage:
        result = CatalogSearchPage(current_page=page, total_pages=page)
        last_page = self._attr(soup.select_one("ul.pagination li.last a"), "href")
        if last_page and "page=" in last_page:
            try:
                max_page = int(last_page.split("page=")[1])
            except ValueError:
                max_page = 0
            result.total_pages = max_page or 1
            result.has_next_page = page < max_page
        return result

    # --- Media page ---

    async def fetch_media_info(self, media_id: str) -> CatalogMediaInfo:
        if media_id.startswith(self.base_url):
            media_url = media_id
            media_id = media_id[len(self.base_url) + 1 :].replace(".html", "")
        else:
            media_url = f"{self.base_url}/{media_id}"

        html = await self._get(media_url)
        soup = BeautifulSoup(html, "html.parser")

        title = self._text(soup.select_one(".info > h1:nth-child(1)"))
        info = CatalogMediaInfo(
            id=media_id,
            title=title,
            other_names=[self._text(a) for a in soup.select(".other_name > a")],
            genres=[
                self._text(a)
                for a in soup.select('div.details div.info p:-soup-contains("Genre:") a')
            ],
            type=MediaType.SERIES,
            status=self._status(soup),
            image=self._attr(soup.select_one("div.details > div.img > img"), "src"),
            description="\n\n".join(
                self._text(p) for p in soup.select("div.details div.info p:not(:has(*))")
            ).strip()
            or None,
            release_date=self._labelled(soup, "Released"),
            content_rating=self._labelled(soup, "Content Rating"),
            airs_on=self._labelled(soup, "Airs On"),
            director=self._labelled(soup, "Director"),
            original_network=self._cleanup(self._labelled(soup, "Original Network")),
            duration=self._labelled(soup, "Duration", first_only=True),
            trailer=self._trailer(soup),
            characters=self._characters(soup),
            episodes=self._episodes(soup, title),
        )
        return info

    def _status(self, soup: BeautifulSoup) -> MediaStatus:
        status = self._text(
            soup.select_one('div.details div.info p:-soup-contains("Status:") a')
        )
        try:
            return MediaStatus(status)
        except ValueError:
            return MediaStatus.UNKNOWN

    def _labelled(
        self, soup: BeautifulSoup, label: str, first_only: bool = False
    ) -> Optional[str]:
        """Value of a ``<p>Label: value</p>`` line in the details block."""
        paragraphs = soup.select(f'div.details div.info p:-soup-contains("{label}:")')
        if first_only:
            paragraphs = paragraphs[:1]
        text = "".join(p.get_text() for p in paragraphs).replace("\n", "")
        value = text.replace(f"{label}:", "").strip()
        return value or None

    def _cleanup(self, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        return "; ".join(part.strip() for part in value.split(";") if part.strip())

    def _trailer(self, soup: BeautifulSoup) -> Optional[Trailer]:
        src = self._attr(soup.select_one("div.trailer iframe"), "src")
        if not src:
            return None
        trailer_id = src.split("embed/")[1].split("?")[0] if "embed/" in src else ""
        return Trailer(id=trailer_id, url=src)

    def _characters(self, soup: BeautifulSoup) -> List[Character]:
        characters = []
        for item in soup.select("div.slider-star > div.item"):
            url = self._attr(item.select_one("a.img"), "href")
            name = self._text(item.select_one("h3.title"))
            if url and name:
                characters.append(
                    Character(
                        name=name,
                        image=self._attr(item.find("img"), "src") or None,
                        url=f"{self.base_url}{url}",
                    )
                )
        return characters

    def _episodes(self, soup: BeautifulSoup, title: str) -> List[CatalogEpisode]:
        episodes = []
        for item in soup.select("div.content-left > div.block-tab > div > div > ul > li"):
            href = self._attr(item.find("a"), "href")
            if not href or "-episode-" not in href:
                continue

            episode_id = href.split(".html")[0][1:]
            raw_number = href.split("-episode-")[1].split(".html")[0]
            try:
                number = float(raw_number.replace("-", "."))
            except ValueError:
                logger.debug(f"{self.name}: skipping unnumbered episode {href}")
                continue

            episode_title = self._text(item.find("h3"))
            if title:
                episode_title = episode_title.replace(title, "").strip()

            episodes.append(
                CatalogEpisode(
                    id=episode_id,
                    title=episode_title,
                    number=number,
                    url=f"{self.base_url}{href}",
                    sub_type=self._text(item.select_one("span.type")) or None,
                    release_date=self._text(item.select_one("span.time")) or None,
                )
            )

        # The site lists newest first
        episodes.reverse()
        return episodes

    # --- Streams ---

    async def fetch_episode_servers(self, episode_id: str) -> List[EpisodeServer]:
        if ".html" in episode_id:
            episode_url = episode_id
        else:
            episode_url = f"{self.base_url}/{episode_id}.html"

        html = await self._get(episode_url)
        soup = BeautifulSoup(html, "html.parser")

        servers = []
        for item in soup.select("div.anime_muti_link > ul > li"):
            url = item.get("data-video")
            if not url:
                continue
            name = " ".join(item.get("class", [])).replace("selected", "").strip()
            if "Standard" in name:
                name = StreamingServer.ASIANLOAD.value
            servers.append(
                EpisodeServer(
                    name=name, url=f"https:{url}" if url.startswith("//") else url
                )
            )
        return servers

    async def fetch_episode_sources(
        self,
        episode_id: str,
        server: StreamingServer | str = StreamingServer.ASIANLOAD,
    ) -> StreamSources:
        """Resolve playable sources.

        ``episode_id`` may be a catalog episode id, in which case the episode
        page is looked up for the named server first, or the server's embed
        URL itself.
        """
        server = parse_server(server)

        if episode_id.startswith("http"):
            extractor = self.extractors.get(server)
            if extractor is None:
                raise UnsupportedServerError(f"Server {server.value} not supported")
            sources = await extractor.extract(episode_id)
            download = None
            if server == StreamingServer.ASIANLOAD:
                download = self._download_link(episode_id)
            return StreamSources(sources=sources, download=download)

        servers = await self.fetch_episode_servers(episode_id)
        match = next((s for s in servers if s.name.lower() == server.value), None)
        if match is None:
            raise ServerNotFoundError(f"Server {server.value} not found")

        return await self.fetch_episode_sources(match.url, server)

    def _download_link(self, url: str) -> str:
        return DOWNLOAD_LINK_PATTERN.sub(r"\1/download\2", url)

    # --- helpers ---

    @staticmethod
    def _text(tag: Tag | None) -> str:
        return tag.get_text().strip() if tag else ""

    @staticmethod
    def _attr(tag: Tag | None, name: str) -> Optional[str]:
        if tag is None:
            return None
        value = tag.get(name)
        return value if isinstance(value, str) else None
