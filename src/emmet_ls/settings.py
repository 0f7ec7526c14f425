"""Routing configuration: process-wide default plus a per-document cache.

When the client supports ``workspace/configuration`` the store pulls settings
per document and caches the retrieval (at most one per document) until the
document closes. Otherwise every document shares the process-wide default,
which ``workspace/didChangeConfiguration`` replaces.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from emmet_ls.config import (
    as_bool,
    completion_defaults,
    filetype_defaults,
    logging_defaults,
    merge_payload,
)
from emmet_ls.schema import InitializationOptions, RoutingConfig, routing_from_settings

logger = logging.getLogger(__name__)

SettingsFetch = Callable[[str], Awaitable[object]]


@dataclass(frozen=True)
class ServerConfig:
    routing: RoutingConfig
    replace_abbreviation: bool = False
    log_level: str = "warning"


def resolve_server_config(
    root: Path | None = None,
    config_path: Path | None = None,
    init_options: object = None,
) -> ServerConfig:
    """Merge ``emmet-ls.toml`` with the client's initialization options.

    Initialization options win; ``None`` values never override.
    """
    options = InitializationOptions.from_payload(init_options)
    filetypes = merge_payload(
        {
            "html_filetypes": options.html_filetypes,
            "css_filetypes": options.css_filetypes,
        },
        filetype_defaults(root=root, config_path=config_path),
    )
    completion = completion_defaults(root=root, config_path=config_path)
    log_section = logging_defaults(root=root, config_path=config_path)
    replace = options.replace_abbreviation
    if replace is None:
        replace = as_bool(completion.get("replace_abbreviation"))
    level = options.log_level or log_section.get("level") or "warning"
    return ServerConfig(
        routing=routing_from_settings(filetypes, fallback=RoutingConfig()),
        replace_abbreviation=replace,
        log_level=str(level),
    )


class SettingsStore:
    def __init__(
        self,
        default: RoutingConfig | None = None,
        fetch: SettingsFetch | None = None,
    ) -> None:
        self.default = default if default is not None else RoutingConfig()
        self._fetch = fetch
        self._documents: dict[str, asyncio.Future[RoutingConfig]] = {}

    @property
    def supports_pull(self) -> bool:
        return self._fetch is not None

    def enable_pull(self, fetch: SettingsFetch) -> None:
        self._fetch = fetch

    def is_cached(self, uri: str) -> bool:
        return uri in self._documents

    async def effective_config(self, uri: str) -> RoutingConfig:
        if self._fetch is None:
            return self.default
        pending = self._documents.get(uri)
        if pending is None or pending.cancelled():
            pending = asyncio.ensure_future(self._retrieve(uri, self._fetch))
            self._documents[uri] = pending
        # A cancelled request must not cancel the retrieval other requests share.
        return await asyncio.shield(pending)

    async def _retrieve(self, uri: str, fetch: SettingsFetch) -> RoutingConfig:
        try:
            payload = await fetch(uri)
            return routing_from_settings(payload, fallback=self.default)
        except Exception as exc:
            logger.warning("settings retrieval for %s failed, using defaults: %s", uri, exc)
            if self._documents.get(uri) is asyncio.current_task():
                self._documents.pop(uri, None)
            return self.default

    def on_configuration_changed(self, payload: object) -> None:
        # Cached per-document entries are left alone; they refresh on close/reopen.
        try:
            self.default = routing_from_settings(payload, fallback=self.default)
        except ValueError as exc:
            logger.warning("ignoring invalid settings payload: %s", exc)

    def on_document_closed(self, uri: str) -> None:
        self._documents.pop(uri, None)
