"""
Tool decorator
"""

from typing import Callable, overload

from .local import FunctionTool


@overload
def tool(func: Callable) -> FunctionTool: ...


@overload
def tool(
    *, name: str | None = None, description: str | None = None
) -> Callable[[Callable], FunctionTool]: ...


def tool(
    func: Callable | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
):
    """
    Decorator to convert a function into a FunctionTool.

    Usable bare (`@tool`) or with overrides
    (`@tool(name="Addition", description="Add two integers")`).

    Args:
        func: The function to decorate
        name: Tool name, defaults to the function name
        description: Tool description, defaults to the docstring

    Returns:
        FunctionTool instance
    """
    if func is not None:
        return FunctionTool(func, name=name, description=description)

    def wrap(f: Callable) -> FunctionTool:
        return FunctionTool(f, name=name, description=description)

    return wrap
