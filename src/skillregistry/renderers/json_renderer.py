"""JSON prompt renderer."""

import json
from typing import Any

from skillregistry.renderers.base import PromptRenderer, RenderType, to_plain


class JsonPromptRenderer(PromptRenderer):
    """Render payloads as indented JSON keyed by payload type."""

    @property
    def format(self) -> str:
        return "json"

    def render(self, data: Any, type: RenderType) -> str:
        return json.dumps({type: to_plain(data)}, indent=2, ensure_ascii=False)
