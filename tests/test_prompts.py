import pytest

from prompts import PRP_PLACEHOLDER, PromptArgumentError, PromptRegistry


@pytest.fixture
def registry(settings):
    return PromptRegistry(settings)


def _text(messages):
    assert len(messages) == 1
    assert messages[0]["role"] == "user"
    assert messages[0]["content"]["type"] == "text"
    return messages[0]["content"]["text"]


def test_generate_prp_substitutes_placeholder(registry, prp_template):
    text = _text(registry.render("generate-prp", {"initialContent": "Build a login page"}))
    assert text == prp_template.replace(PRP_PLACEHOLDER, "Build a login page")
    assert PRP_PLACEHOLDER not in text


def test_generate_prp_replaces_first_occurrence_only(registry, settings):
    settings.prp_template_path.write_text(f"{PRP_PLACEHOLDER}\n{PRP_PLACEHOLDER}\n", encoding="utf-8")
    text = _text(registry.render("generate-prp", {"initialContent": "X"}))
    assert text == f"X\n{PRP_PLACEHOLDER}\n"


def test_generate_prp_without_placeholder_is_noop(registry, settings):
    settings.prp_template_path.write_text("no marker here\n", encoding="utf-8")
    assert _text(registry.render("generate-prp", {"initialContent": "X"})) == "no marker here\n"


def test_generate_prp_reads_template_each_time(registry, settings):
    _text(registry.render("generate-prp", {"initialContent": "X"}))
    settings.prp_template_path.write_text("changed\n", encoding="utf-8")
    assert _text(registry.render("generate-prp", {"initialContent": "X"})) == "changed\n"


def test_generate_prp_missing_template_is_fatal(registry, settings):
    settings.prp_template_path.unlink()
    with pytest.raises(FileNotFoundError):
        registry.render("generate-prp", {"initialContent": "X"})


def test_execute_prp_scaffold(registry):
    text = _text(registry.render("execute-prp", {"prpContent": "X {not a field}"}))
    assert text.startswith("\n# Execute BASE PRP\n\nImplement a feature using using the PRP file.\n")
    assert "## PRP File: \n\nX {not a field}\n\n## Execution Process" in text
    for phase in (
        "1. **Load PRP**",
        "2. **ULTRATHINK**",
        "3. **Execute the plan**",
        "4. **Validate**",
        "5. **Complete**",
        "6. **Reference the PRP**",
    ):
        assert phase in text
    assert "Note: If validation fails, use error patterns in PRP to fix and retry." in text


def test_unknown_prompt(registry):
    with pytest.raises(KeyError):
        registry.render("delete-prp", {})


@pytest.mark.parametrize("arguments", [None, {}, {"prpContent": 3}, {"initialContent": "wrong key"}, ["x"], "ab", 5])
def test_missing_argument(registry, arguments):
    with pytest.raises(PromptArgumentError):
        registry.render("execute-prp", arguments)


def test_list_prompts(registry):
    assert registry.list_prompts() == [
        {
            "name": "generate-prp",
            "title": "Generate PRP",
            "description": "Generates a Product Requirements Prompt (PRP) from an initial feature request.",
            "arguments": [{"name": "initialContent", "required": True}],
        },
        {
            "name": "execute-prp",
            "title": "Execute PRP",
            "description": "Executes a Product Requirements Prompt (PRP) to implement a feature.",
            "arguments": [{"name": "prpContent", "required": True}],
        },
    ]
