from __future__ import annotations

import logging
import string
import uuid
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlparse

from pygls.lsp.server import LanguageServer
from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    INITIALIZE,
    INITIALIZED,
    SHUTDOWN,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CLOSE,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS,
    CompletionItem,
    CompletionOptions,
    CompletionParams,
    ConfigurationItem,
    ConfigurationParams,
    DidChangeConfigurationParams,
    DidChangeWorkspaceFoldersParams,
    DidCloseTextDocumentParams,
    InitializedParams,
    InitializeParams,
    Registration,
    RegistrationParams,
    TextDocumentSyncKind,
)

from emmet_ls import __version__
from emmet_ls.completion import complete_line
from emmet_ls.dispatch import route
from emmet_ls.exceptions import DocumentNotFound
from emmet_ls.log import apply_log_level, attach_client_logging
from emmet_ls.schema import SETTINGS_SECTION
from emmet_ls.settings import SettingsStore, resolve_server_config

logger = logging.getLogger(__name__)

# Abbreviations can start or grow on any letter or digit.
TRIGGER_CHARACTERS = [
    ">",
    ")",
    "]",
    "}",
    "@",
    "*",
    "$",
    "+",
    *string.ascii_lowercase,
    *string.ascii_uppercase,
    *string.digits,
]

class SessionState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    SHUTTING_DOWN = "shutting_down"


class EmmetLanguageServer(LanguageServer):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.settings_store = SettingsStore()
        self.session_state = SessionState.UNINITIALIZED
        self.replace_abbreviation = False
        self.config_path: Path | None = None
        self.has_configuration_capability = False
        self.has_workspace_folder_capability = False


server = EmmetLanguageServer(
    "emmet-ls",
    __version__,
    text_document_sync_kind=TextDocumentSyncKind.Incremental,
)


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def _workspace_root(params: InitializeParams) -> Path | None:
    if params.root_uri:
        return _uri_to_path(params.root_uri)
    if params.root_path:
        return Path(params.root_path)
    return None


def document_line(lines: list[str], line_number: int) -> str:
    """Line text without its terminator, indexed like the position codec's lines."""
    if not 0 <= line_number < len(lines):
        return ""
    stripped = lines[line_number].splitlines()
    return stripped[0] if stripped else ""


async def _pull_settings(ls: EmmetLanguageServer, uri: str) -> object:
    results = await ls.workspace_configuration_async(
        ConfigurationParams(
            items=[ConfigurationItem(scope_uri=uri, section=SETTINGS_SECTION)]
        )
    )
    return results[0] if results else None


@server.feature(INITIALIZE)
def initialize(ls: EmmetLanguageServer, params: InitializeParams) -> None:
    workspace = params.capabilities.workspace
    ls.has_configuration_capability = bool(workspace and workspace.configuration)
    ls.has_workspace_folder_capability = bool(workspace and workspace.workspace_folders)
    config = resolve_server_config(
        root=_workspace_root(params),
        config_path=ls.config_path,
        init_options=params.initialization_options,
    )
    apply_log_level(config.log_level)
    ls.replace_abbreviation = config.replace_abbreviation
    ls.settings_store = SettingsStore(default=config.routing)
    if ls.has_configuration_capability:
        ls.settings_store.enable_pull(partial(_pull_settings, ls))
    ls.session_state = SessionState.INITIALIZED


@server.feature(INITIALIZED)
def initialized(ls: EmmetLanguageServer, params: InitializedParams) -> None:
    if ls.has_configuration_capability:
        ls.client_register_capability(
            RegistrationParams(
                registrations=[
                    Registration(
                        id=str(uuid.uuid4()),
                        method=WORKSPACE_DID_CHANGE_CONFIGURATION,
                    )
                ]
            )
        )


@server.feature(WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
def did_change_workspace_folders(
    ls: EmmetLanguageServer, params: DidChangeWorkspaceFoldersParams
) -> None:
    if ls.has_workspace_folder_capability:
        logger.info("Workspace folder change event received.")


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: EmmetLanguageServer, params: DidChangeConfigurationParams
) -> None:
    ls.settings_store.on_configuration_changed(params.settings)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: EmmetLanguageServer, params: DidCloseTextDocumentParams) -> None:
    ls.settings_store.on_document_closed(params.text_document.uri)


async def _complete(ls: EmmetLanguageServer, params: CompletionParams) -> list[CompletionItem]:
    uri = params.text_document.uri
    doc = ls.workspace.text_documents.get(uri)
    if doc is None:
        raise DocumentNotFound(uri)
    config = await ls.settings_store.effective_config(uri)
    grammars = route(doc.language_id, config)
    if not grammars:
        return []
    lines = doc.lines
    position = doc.position_codec.position_from_client_units(lines, params.position)
    return complete_line(
        position.line,
        document_line(lines, position.line),
        position.character,
        grammars,
        replace_abbreviation=ls.replace_abbreviation,
        range_mapper=partial(doc.position_codec.range_to_client_units, lines),
    )


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(trigger_characters=TRIGGER_CHARACTERS, resolve_provider=True),
)
async def completion(ls: EmmetLanguageServer, params: CompletionParams) -> list[CompletionItem]:
    if ls.session_state is not SessionState.INITIALIZED:
        return []
    try:
        return await _complete(ls, params)
    except DocumentNotFound as exc:
        logger.warning("ERR: %s", exc)
    except Exception as exc:
        logger.exception("ERR: %s", exc)
    return []


@server.feature(COMPLETION_ITEM_RESOLVE)
def completion_resolve(ls: EmmetLanguageServer, item: CompletionItem) -> CompletionItem:
    return item


@server.feature(SHUTDOWN)
def shutdown(ls: EmmetLanguageServer, params: None) -> None:
    ls.session_state = SessionState.SHUTTING_DOWN


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server over stdio unless another starter is given."""
    attach_client_logging(server)
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
