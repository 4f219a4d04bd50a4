from __future__ import annotations

import functools
import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    get_origin,
    get_type_hints,
)

from .client import TwentyIClient
from .errors import ErrorKind, TwentyIError

log = logging.getLogger("twentyi_mcp.core.registry")

ClientProvider = Callable[[], TwentyIClient]


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "twentyi_mcp.core.tools",
) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        try:
            module = importlib.import_module(name)
            modules.append(module)
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)
            continue

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield functions that satisfy the tool convention."""
    for _, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if func.__name__.startswith("_"):
            continue
        if func.__module__ != module.__name__:
            # Skip imported functions
            continue

        sig = inspect.signature(func)
        params = list(sig.parameters.values())
        if not params or params[0].name != "client":
            log.debug(
                "Skipping %s.%s: first parameter must be 'client'",
                module.__name__,
                func.__name__,
            )
            continue

        # FastMCP/Pydantic cannot build a schema for Type[...] parameters.
        if any(get_origin(p.annotation) is type for p in params[1:]):
            log.debug(
                "Skipping %s.%s: unsupported parameter annotation (Type[...] detected)",
                module.__name__,
                func.__name__,
            )
            continue

        yield func


def build_operation_table(
    modules: Optional[List[ModuleType]] = None,
) -> Dict[str, Callable]:
    """Map operation name -> tool function; names must be unique."""
    modules = modules or discover_tool_modules()
    table: Dict[str, Callable] = {}

    for module in modules:
        for func in iter_tool_functions(module):
            name = func.__name__
            if name in table:
                raise ValueError(f"Duplicate tool name detected: {name}")
            table[name] = func

    return table


@functools.lru_cache(maxsize=None)
def default_operation_table() -> Dict[str, Callable]:
    """Operation table for the installed tools package, built on first use."""
    return build_operation_table()


# --- Dispatch -------------------------------------------------------------- #


async def invoke(
    client: TwentyIClient,
    operation: str,
    args: Optional[Mapping[str, Any]] = None,
    *,
    table: Optional[Dict[str, Callable]] = None,
) -> Any:
    """
    Run one named operation.
    Returns the normalized result or raises TwentyIError; unknown operations
    and arguments that do not fit the operation are validation errors.
    """
    table = table if table is not None else default_operation_table()
    func = table.get(operation)
    if func is None:
        raise TwentyIError(
            ErrorKind.VALIDATION, f"Unknown operation: {operation}", cause=operation
        )

    kwargs = dict(args or {})
    try:
        inspect.signature(func).bind(client, **kwargs)
    except TypeError as exc:
        raise TwentyIError(
            ErrorKind.VALIDATION,
            f"Invalid arguments for {operation}: {exc}",
            cause=kwargs,
        ) from exc

    return await func(client, **kwargs)


# --- Wrapping / registration ---------------------------------------------- #


def _wrap_tool(func: Callable, client_provider: ClientProvider) -> Callable:
    """Return a wrapper that injects client and hides it from the signature."""
    original_sig = inspect.signature(func)
    type_hints = get_type_hints(func)

    new_params = []
    for i, (name, param) in enumerate(original_sig.parameters.items()):
        if i == 0 and name == "client":
            continue  # drop injected client
        ann = type_hints.get(name, param.annotation)
        new_params.append(param.replace(annotation=ann))

    return_ann = type_hints.get("return", original_sig.return_annotation)
    new_sig = inspect.Signature(parameters=new_params, return_annotation=return_ann)

    async def wrapped(*args, **kwargs):
        client = client_provider()
        return await func(client, *args, **kwargs)

    wrapped.__name__ = func.__name__
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = new_sig  # type: ignore[attr-defined]
    return wrapped


def register_discovered_tools(
    app,
    client_provider: ClientProvider | TwentyIClient,
    modules: List[ModuleType] | None = None,
) -> None:
    """Register discovered tools on an app that exposes a .tool decorator."""
    if isinstance(client_provider, TwentyIClient):
        _client = client_provider

        def client_provider():
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    for name, func in build_operation_table(modules).items():
        app.tool(name=name)(_wrap_tool(func, client_provider))
        log.info("Registered tool: %s (%s)", name, func.__module__)
