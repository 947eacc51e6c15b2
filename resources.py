from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import Settings
import file_resolver

logger = logging.getLogger(__name__)

MARKDOWN = "text/markdown"
PLAIN_TEXT = "text/plain"

CORE_PRINCIPLES = (
    "## Core Principles\n"
    "\n"
    "- **Consistency First**: All code should follow established patterns and standards\n"
    "- **Object-Oriented Preference**: Favor OOP design patterns unless functional programming "
    "is more appropriate for the specific use case\n"
    "- **Self-Documenting Code**: Write code that explains itself through clear naming and structure\n"
    "- **Containerized Development**: All projects should be Docker-ready from the start\n"
    "- **Maintainability**: Code should be easy to read, modify, and extend"
)

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ResourceNotFoundError(KeyError):
    """Raised when no registered resource matches a URI."""


@dataclass(frozen=True)
class ResourceContent:
    uri: str
    text: str
    mime_type: str = MARKDOWN

    def as_payload(self) -> Dict[str, str]:
        return {"uri": self.uri, "text": self.text, "mimeType": self.mime_type}


Handler = Callable[..., List[ResourceContent]]


@dataclass(frozen=True)
class ResourceDefinition:
    name: str
    uri: str
    title: str
    description: str
    handler: Handler
    mime_type: Optional[str] = None

    @property
    def parameter(self) -> Optional[str]:
        match = _PLACEHOLDER.search(self.uri)
        return match.group(1) if match else None

    @property
    def is_template(self) -> bool:
        return self.parameter is not None

    def compile(self) -> re.Pattern[str]:
        """Turn ``scheme://prefix/{param}`` into a single-segment capture regex."""
        parts = _PLACEHOLDER.split(self.uri)
        if len(parts) != 3:
            raise ValueError(f"resource template must have exactly one placeholder: {self.uri}")
        prefix, param, suffix = parts
        return re.compile(f"^{re.escape(prefix)}(?P<{param}>[^/]+){re.escape(suffix)}$")

    def as_metadata(self) -> Dict[str, str]:
        key = "uriTemplate" if self.is_template else "uri"
        metadata = {key: self.uri, "name": self.name, "title": self.title, "description": self.description}
        if self.mime_type:
            metadata["mimeType"] = self.mime_type
        return metadata


def _first(value: Any) -> str:
    # Routing layers may hand over every value captured for a placeholder.
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return str(value)


class ResourceRegistry:
    """Resources exposed by the server, rebuilt for every request."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._literals: Dict[str, ResourceDefinition] = {}
        self._templates: List[Tuple[re.Pattern[str], ResourceDefinition]] = []

        self._register(
            ResourceDefinition(
                name="greeting",
                uri="greeting://{name}",
                title="Greeting Resource",
                description="Dynamic greeting generator",
                handler=self._greeting,
            )
        )
        self._register(
            ResourceDefinition(
                name="core-principles",
                uri="principles://core",
                title="Core Principles",
                description="The core principles for development.",
                handler=self._core_principles,
                mime_type=MARKDOWN,
            )
        )
        self._register(
            ResourceDefinition(
                name="language-standards",
                uri="standards://language/{languageName}",
                title="Language-Specific Coding Standards",
                description="Provides coding standards for a specific language.",
                handler=self._language_standards,
            )
        )
        self._register(
            ResourceDefinition(
                name="claude-rules",
                uri="rules://claude.md",
                title="Claude AI Rules",
                description="The global rules for the AI assistant.",
                handler=self._claude_rules,
                mime_type=MARKDOWN,
            )
        )
        self._register(
            ResourceDefinition(
                name="prp-base-template",
                uri="templates://prp_base.md",
                title="Base PRP Template",
                description="The base template for generating new PRPs.",
                handler=self._prp_base_template,
                mime_type=MARKDOWN,
            )
        )
        self._register(
            ResourceDefinition(
                name="examples",
                uri="examples://{exampleName}",
                title="Code Examples",
                description="Provides code examples from the context-template/examples directory.",
                handler=self._examples,
            )
        )

    def _register(self, definition: ResourceDefinition) -> None:
        known = set(self._literals) | {existing.uri for _, existing in self._templates}
        if definition.uri in known:
            raise ValueError(f"resource already registered: {definition.uri}")
        if definition.is_template:
            self._templates.append((definition.compile(), definition))
        else:
            self._literals[definition.uri] = definition

    def list_resources(self) -> List[Dict[str, str]]:
        return [definition.as_metadata() for definition in self._literals.values()]

    def list_templates(self) -> List[Dict[str, str]]:
        return [definition.as_metadata() for _, definition in self._templates]

    def match(self, uri: str) -> Tuple[ResourceDefinition, Dict[str, str]]:
        definition = self._literals.get(uri)
        if definition is not None:
            return definition, {}
        for pattern, definition in self._templates:
            found = pattern.match(uri)
            if found:
                return definition, found.groupdict()
        raise ResourceNotFoundError(uri)

    def read_resource(self, uri: str) -> List[ResourceContent]:
        definition, params = self.match(uri)
        logger.debug("reading %s via %s", uri, definition.name)
        return definition.handler(uri, **params)

    # ---------------------------- Handlers -------------------------------

    def _greeting(self, uri: str, name: Any) -> List[ResourceContent]:
        return [ResourceContent(uri=uri, text=f"Hello, {_first(name)}! This is your personal MCP server.")]

    def _core_principles(self, uri: str) -> List[ResourceContent]:
        return [ResourceContent(uri=uri, text=CORE_PRINCIPLES)]

    def _language_standards(self, uri: str, languageName: Any) -> List[ResourceContent]:  # noqa: N803
        language = _first(languageName)
        text = file_resolver.read_text(self._settings.standards_dir, f"{language.lower()}.md")
        if text is None:
            return [
                ResourceContent(
                    uri=uri,
                    text=f"No specific coding standards found for '{language}'.",
                    mime_type=PLAIN_TEXT,
                )
            ]
        return [ResourceContent(uri=uri, text=text, mime_type=MARKDOWN)]

    def _claude_rules(self, uri: str) -> List[ResourceContent]:
        return [ResourceContent(uri=uri, text=file_resolver.read_required(self._settings.claude_rules_path))]

    def _prp_base_template(self, uri: str) -> List[ResourceContent]:
        return [ResourceContent(uri=uri, text=file_resolver.read_required(self._settings.prp_template_path))]

    def _examples(self, uri: str, exampleName: Any) -> List[ResourceContent]:  # noqa: N803
        example = _first(exampleName)
        examples_dir = self._settings.examples_dir

        if example == "list":
            listing = "\n".join(f"- {entry}" for entry in file_resolver.list_entries(examples_dir))
            return [ResourceContent(uri=uri, text=f"Available examples:\n{listing}", mime_type=MARKDOWN)]

        text = file_resolver.read_text(examples_dir, example)
        if text is None:
            return [ResourceContent(uri=uri, text=f"Example '{example}' not found.", mime_type=PLAIN_TEXT)]
        return [ResourceContent(uri=uri, text=text, mime_type=PLAIN_TEXT)]
