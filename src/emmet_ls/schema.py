from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from emmet_ls.config import merge_payload, normalize_name_list

SETTINGS_SECTION = "emmet_ls"
DEFAULT_HTML_FILETYPES = ("html",)
DEFAULT_CSS_FILETYPES = ("css",)


class RoutingConfig(BaseModel):
    """Language ids routed to the markup and stylesheet grammars.

    The two lists are independent; a language id present in both gets both
    grammars attempted.
    """

    html_filetypes: List[str] = list(DEFAULT_HTML_FILETYPES)
    css_filetypes: List[str] = list(DEFAULT_CSS_FILETYPES)

    @field_validator("html_filetypes", "css_filetypes", mode="before")
    @classmethod
    def _normalize_filetypes(cls, value: object) -> list[str]:
        return normalize_name_list(value)

    def is_markup(self, language_id: str | None) -> bool:
        return language_id is not None and language_id in self.html_filetypes

    def is_stylesheet(self, language_id: str | None) -> bool:
        return language_id is not None and language_id in self.css_filetypes


def routing_from_settings(
    payload: object,
    *,
    fallback: RoutingConfig,
    section: str = SETTINGS_SECTION,
) -> RoutingConfig:
    """Build a ``RoutingConfig`` from a client settings payload.

    Keys may sit at the top level or under ``section``; keys the payload does
    not carry keep the fallback's values. Raises ``ValueError`` (pydantic's
    ``ValidationError``) for payloads that are not objects.
    """
    if payload is None:
        return fallback
    if not isinstance(payload, Mapping):
        raise ValueError(f"settings payload must be an object, got {type(payload).__name__}")
    nested = payload.get(section)
    if isinstance(nested, Mapping):
        payload = nested
    known = {
        key: payload.get(key)
        for key in RoutingConfig.model_fields
        if key in payload
    }
    return RoutingConfig.model_validate(merge_payload(known, fallback.model_dump()))


class InitializationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    html_filetypes: Optional[List[str]] = None
    css_filetypes: Optional[List[str]] = None
    replace_abbreviation: Optional[bool] = Field(None, alias="replaceAbbreviation")
    log_level: Optional[str] = Field(None, alias="logLevel")

    @field_validator("html_filetypes", "css_filetypes", mode="before")
    @classmethod
    def _normalize_filetypes(cls, value: object) -> list[str] | None:
        if value is None:
            return None
        return normalize_name_list(value)

    @classmethod
    def from_payload(cls, payload: Any) -> InitializationOptions:
        if not isinstance(payload, Mapping):
            return cls()
        return cls.model_validate(dict(payload))
