"""Resolve minified JavaScript stack traces to original source locations."""

from stack_resolver._version import __version__
from stack_resolver.core import StackResolver, resolve_stack
from stack_resolver.models import ResolvedFrame, SourceMapDocument, StackFrame
from stack_resolver.utils.async_helpers import DocumentDecodeError, InputError, ResolverError

__all__ = [
    "DocumentDecodeError",
    "InputError",
    "ResolvedFrame",
    "ResolverError",
    "SourceMapDocument",
    "StackFrame",
    "StackResolver",
    "__version__",
    "resolve_stack",
]
