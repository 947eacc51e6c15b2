from __future__ import annotations

from typing import Optional

from fastmcp import FastMCP

from config import Settings
from dispatcher import SERVER_NAME
from prompts import PromptRegistry
from resources import MARKDOWN, ResourceRegistry


def create_mcp(settings: Optional[Settings] = None) -> FastMCP:
    """Create a FastMCP server exposing the same resources and prompts as the HTTP endpoint.

    Used for the stdio transport. Each handler builds fresh registries, so no
    state survives between calls here either.
    """
    cfg = settings or Settings.from_env()

    mcp = FastMCP(name=SERVER_NAME)

    def _read(uri: str) -> str:
        return ResourceRegistry(cfg).read_resource(uri)[0].text

    def _render(name: str, **arguments: str) -> str:
        return PromptRegistry(cfg).render(name, arguments)[0]["content"]["text"]

    # ---------------------------- Resources -----------------------------

    @mcp.resource("greeting://{name}", name="greeting", description="Dynamic greeting generator")
    def greeting(name: str) -> str:
        return _read(f"greeting://{name}")

    @mcp.resource(
        "principles://core",
        name="core-principles",
        description="The core principles for development.",
        mime_type=MARKDOWN,
    )
    def core_principles() -> str:
        return _read("principles://core")

    @mcp.resource(
        "standards://language/{languageName}",
        name="language-standards",
        description="Provides coding standards for a specific language.",
    )
    def language_standards(languageName: str) -> str:  # noqa: N803 - URI placeholder name
        return _read(f"standards://language/{languageName}")

    @mcp.resource(
        "rules://claude.md",
        name="claude-rules",
        description="The global rules for the AI assistant.",
        mime_type=MARKDOWN,
    )
    def claude_rules() -> str:
        return _read("rules://claude.md")

    @mcp.resource(
        "templates://prp_base.md",
        name="prp-base-template",
        description="The base template for generating new PRPs.",
        mime_type=MARKDOWN,
    )
    def prp_base_template() -> str:
        return _read("templates://prp_base.md")

    @mcp.resource(
        "examples://{exampleName}",
        name="examples",
        description="Provides code examples from the context-template/examples directory.",
    )
    def examples(exampleName: str) -> str:  # noqa: N803 - URI placeholder name
        return _read(f"examples://{exampleName}")

    # ----------------------------- Prompts ------------------------------

    @mcp.prompt(
        name="generate-prp",
        description="Generates a Product Requirements Prompt (PRP) from an initial feature request.",
    )
    def generate_prp(initialContent: str) -> str:  # noqa: N803 - MCP argument name
        return _render("generate-prp", initialContent=initialContent)

    @mcp.prompt(
        name="execute-prp",
        description="Executes a Product Requirements Prompt (PRP) to implement a feature.",
    )
    def execute_prp(prpContent: str) -> str:  # noqa: N803 - MCP argument name
        return _render("execute-prp", prpContent=prpContent)

    return mcp
