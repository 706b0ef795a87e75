"""Request template and endpoint request builders."""

from __future__ import annotations

import json
from typing import Any

from .config import ClientConfig
from .models import RequestTemplate
from .validation import normalize_url

SUGGEST_PATH = "/suggest"
AUTOCOMPLETE_PATH = "/autocomplete"


def build_template(config: ClientConfig) -> RequestTemplate:
    """Return a use-once request: a clone of the override, or a fresh JSON POST."""
    override = config.request
    if override is not None and callable(getattr(override, "clone", None)):
        template = override.clone()
    else:
        template = RequestTemplate()

    if not any(name.lower() == "user-agent" for name in template.headers):
        template.headers["User-Agent"] = config.user_agent
    return template


def build_suggestion_request(config: ClientConfig) -> RequestTemplate:
    return build_template(config).replace(url=normalize_url(config.url, SUGGEST_PATH))


def build_autocomplete_request(config: ClientConfig) -> RequestTemplate:
    return build_template(config).replace(url=normalize_url(config.url, AUTOCOMPLETE_PATH))


def attach_json_body(request: RequestTemplate, payload: dict[str, Any]) -> RequestTemplate:
    """Return a copy of request carrying payload as a compact JSON body."""
    body = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return request.replace(body=body)
