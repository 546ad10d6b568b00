import inspect
from typing import Any, Callable, get_type_hints

from pydantic import BaseModel, ValidationError, create_model

from agentloop.exceptions import ToolError, ToolRuntimeError, ToolSerdeError
from agentloop.tools.base import Tool

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class FunctionTool(Tool):
    """Tool backed by a plain synchronous Python function."""

    def __init__(self, func: Callable, name: str | None = None, description: str | None = None):
        if inspect.iscoroutinefunction(func):
            raise TypeError(
                f"Tool function {func.__name__} is a coroutine; tools run synchronously"
            )
        self.name = name or func.__name__
        self.func = func
        self.description = description or inspect.getdoc(func) or ""
        self.args_model = self._create_args_model(func)

    def _create_args_model(self, func: Callable) -> type[BaseModel]:
        """Build the argument model from the function signature."""
        hints = get_type_hints(func)
        fields: dict[str, Any] = {}
        for p in inspect.signature(func).parameters.values():
            if p.name in ("self", "cls") or p.kind in _VARIADIC:
                continue
            required = p.default is inspect.Parameter.empty
            fields[p.name] = (hints.get(p.name, Any), ... if required else p.default)
        return create_model(f"{self.name}Args", **fields)

    def run(self, args: Any) -> Any:
        if args is None:
            args = {}
        if not isinstance(args, dict):
            raise ToolSerdeError(f"Expected a JSON object, got {type(args).__name__}")

        try:
            validated = self.args_model.model_validate(args)
        except ValidationError as e:
            raise ToolSerdeError(str(e)) from e

        kwargs = {field: getattr(validated, field) for field in type(validated).model_fields}
        try:
            output = self.func(**kwargs)
        except ToolError:
            raise
        except Exception as e:
            raise ToolRuntimeError(str(e)) from e

        if isinstance(output, BaseModel):
            return output.model_dump(mode="json")
        return output
