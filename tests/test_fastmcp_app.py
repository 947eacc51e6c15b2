import asyncio

from fastmcp import Client

from fastmcp_app import create_mcp


def _run(settings, action):
    async def go():
        async with Client(create_mcp(settings)) as client:
            return await action(client)

    return asyncio.run(go())


def test_reads_standards(settings):
    contents = _run(settings, lambda c: c.read_resource("standards://language/Go"))
    assert contents[0].text == "# Go\n- gofmt everything\n"


def test_reads_core_principles(settings):
    contents = _run(settings, lambda c: c.read_resource("principles://core"))
    assert contents[0].text.startswith("## Core Principles")


def test_lists_examples(settings):
    contents = _run(settings, lambda c: c.read_resource("examples://list"))
    assert contents[0].text.startswith("Available examples:\n- ")


def test_execute_prp_prompt(settings):
    result = _run(settings, lambda c: c.get_prompt("execute-prp", {"prpContent": "X"}))
    text = result.messages[0].content.text
    assert result.messages[0].role == "user"
    assert "## PRP File: \n\nX\n" in text


def test_generate_prp_prompt(settings):
    result = _run(settings, lambda c: c.get_prompt("generate-prp", {"initialContent": "Build a login page"}))
    assert "Build a login page" in result.messages[0].content.text


def test_registered_names(settings):
    async def names(client):
        resources = await client.list_resources()
        templates = await client.list_resource_templates()
        prompts = await client.list_prompts()
        return (
            {str(r.uri) for r in resources},
            {t.uriTemplate for t in templates},
            {p.name for p in prompts},
        )

    resources, templates, prompts = _run(settings, names)
    assert resources == {"principles://core", "rules://claude.md", "templates://prp_base.md"}
    assert templates == {"greeting://{name}", "standards://language/{languageName}", "examples://{exampleName}"}
    assert prompts == {"generate-prp", "execute-prp"}
