from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from config import Settings
import file_resolver


PRP_PLACEHOLDER = "[What needs to be built - be specific about the end state and desires]"

EXECUTE_PRP_TEMPLATE = """
# Execute BASE PRP

Implement a feature using using the PRP file.

## PRP File: 

{prp_content}

## Execution Process

1. **Load PRP**
   - Read the specified PRP file
   - Understand all context and requirements
   - Follow all instructions in the PRP and extend the research if needed
   - Ensure you have all needed context to implement the PRP fully
   - Do more web searches and codebase exploration as needed

2. **ULTRATHINK**
   - Think hard before you execute the plan. Create a comprehensive plan addressing all requirements.
   - Break down complex tasks into smaller, manageable steps using your todos tools.
   - Use the TodoWrite tool to create and track your implementation plan.
   - Identify implementation patterns from existing code to follow.

3. **Execute the plan**
   - Execute the PRP
   - Implement all the code

4. **Validate**
   - Run each validation command
   - Fix any failures
   - Re-run until all pass

5. **Complete**
   - Ensure all checklist items done
   - Run final validation suite
   - Report completion status
   - Read the PRP again to ensure you have implemented everything

6. **Reference the PRP**
   - You can always reference the PRP again if needed

Note: If validation fails, use error patterns in PRP to fix and retry.
      """


class PromptArgumentError(ValueError):
    """Raised when a prompt is invoked without its required string arguments."""


def user_message(text: str) -> Dict[str, Any]:
    return {"role": "user", "content": {"type": "text", "text": text}}


@dataclass(frozen=True)
class PromptDefinition:
    name: str
    title: str
    description: str
    arguments: Tuple[str, ...]
    render: Callable[..., str]

    def as_metadata(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "arguments": [{"name": argument, "required": True} for argument in self.arguments],
        }


class PromptRegistry:
    """Prompts exposed by the server, rebuilt for every request."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._prompts: Dict[str, PromptDefinition] = {}
        self._register(
            PromptDefinition(
                name="generate-prp",
                title="Generate PRP",
                description="Generates a Product Requirements Prompt (PRP) from an initial feature request.",
                arguments=("initialContent",),
                render=self._generate_prp,
            )
        )
        self._register(
            PromptDefinition(
                name="execute-prp",
                title="Execute PRP",
                description="Executes a Product Requirements Prompt (PRP) to implement a feature.",
                arguments=("prpContent",),
                render=self._execute_prp,
            )
        )

    def _register(self, definition: PromptDefinition) -> None:
        if definition.name in self._prompts:
            raise ValueError(f"prompt already registered: {definition.name}")
        self._prompts[definition.name] = definition

    def list_prompts(self) -> List[Dict[str, Any]]:
        return [definition.as_metadata() for definition in self._prompts.values()]

    def get_prompt(self, name: str) -> PromptDefinition:
        if name not in self._prompts:
            raise KeyError(name)
        return self._prompts[name]

    def render(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Expand prompt ``name`` with ``arguments`` into its message list."""
        definition = self.get_prompt(name)
        if arguments is not None and not isinstance(arguments, Mapping):
            raise PromptArgumentError(f"prompt '{name}' arguments must be an object")
        supplied = dict(arguments or {})
        values: Dict[str, str] = {}
        for argument in definition.arguments:
            value = supplied.get(argument)
            if not isinstance(value, str):
                raise PromptArgumentError(f"prompt '{name}' requires string argument '{argument}'")
            values[argument] = value
        return [user_message(definition.render(**values))]

    def _generate_prp(self, initialContent: str) -> str:  # noqa: N803
        template = file_resolver.read_required(self._settings.prp_template_path)
        return template.replace(PRP_PLACEHOLDER, initialContent, 1)

    def _execute_prp(self, prpContent: str) -> str:  # noqa: N803
        return EXECUTE_PRP_TEMPLATE.format(prp_content=prpContent)
