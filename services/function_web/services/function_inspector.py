"""
Function type inspection.

Resolves a callable's kind and input/output descriptors from its type hints
once, at registration time, and answers the cardinality questions the
controller asks per request.
"""

import collections.abc
import inspect
import logging
import types
import typing
from typing import Any, Optional, Tuple

from ..models.function import FunctionKind, FunctionType, Wrapper
from ..models.message import Message

logger = logging.getLogger("function_web.inspector")

_FLUX_ORIGINS = {
    collections.abc.AsyncIterator,
    collections.abc.AsyncIterable,
    collections.abc.AsyncGenerator,
}
_MONO_ORIGINS = {collections.abc.Awaitable, collections.abc.Coroutine}
_STREAM_ORIGINS = {collections.abc.Iterator, collections.abc.Generator}
_COLLECTION_ORIGINS = {
    list,
    set,
    tuple,
    frozenset,
    collections.abc.Collection,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
}
_UNION_ORIGINS = {typing.Union, types.UnionType}
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def is_collection(annotation: Any) -> bool:
    return annotation in _COLLECTION_ORIGINS or typing.get_origin(annotation) in _COLLECTION_ORIGINS


def is_stream(annotation: Any) -> bool:
    return annotation in _STREAM_ORIGINS or typing.get_origin(annotation) in _STREAM_ORIGINS


def unwrap(annotation: Any) -> Tuple[Wrapper, Any, bool]:
    """
    Peel the wrapper and message envelope off an annotation.

    Returns:
        (wrapper, item type, is_message)
    """
    wrapper = Wrapper.PLAIN
    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin in _FLUX_ORIGINS:
        wrapper = Wrapper.FLUX
        annotation = args[0] if args else Any
    elif origin in _MONO_ORIGINS:
        wrapper = Wrapper.MONO
        annotation = args[-1] if args else Any
    elif origin in _UNION_ORIGINS and type(None) in args:
        remaining = [arg for arg in args if arg is not type(None)]
        wrapper = Wrapper.OPTIONAL
        annotation = remaining[0] if len(remaining) == 1 else typing.Union[tuple(remaining)]

    if annotation is Message:
        return wrapper, Any, True
    if typing.get_origin(annotation) is Message:
        message_args = typing.get_args(annotation)
        return wrapper, message_args[0] if message_args else Any, True
    return wrapper, annotation, False


def _type_hints(target: Any) -> dict:
    subject = target if inspect.isroutine(target) else type(target).__call__
    try:
        return typing.get_type_hints(subject)
    except Exception as e:
        logger.warning(f"Could not resolve type hints for {target!r}: {e}")
        return {}


def resolve_function_type(target: Any, kind: Optional[FunctionKind] = None) -> FunctionType:
    """
    Build the FunctionType of a callable.

    Without an explicit kind: no positional parameter means supplier, a
    ``-> None`` return means consumer, anything else is a function.
    """
    hints = _type_hints(target)
    params = [
        p for p in inspect.signature(target).parameters.values() if p.kind in _POSITIONAL
    ]
    returns_none = hints.get("return", Any) is type(None)

    if kind is None:
        if not params:
            kind = FunctionKind.SUPPLIER
        elif returns_none:
            kind = FunctionKind.CONSUMER
        else:
            kind = FunctionKind.FUNCTION
    kind = FunctionKind(kind)

    descriptor = {"kind": kind}
    if kind is not FunctionKind.SUPPLIER and params:
        input_wrapper, input_type, input_is_message = unwrap(hints.get(params[0].name, Any))
        descriptor.update(
            input_type=input_type,
            input_wrapper=input_wrapper,
            input_is_message=input_is_message,
        )

    if kind is FunctionKind.CONSUMER:
        descriptor.update(output_type=type(None))
    else:
        output_wrapper, output_type, output_is_message = unwrap(hints.get("return", Any))
        if descriptor.get("input_wrapper") is Wrapper.FLUX and output_wrapper is Wrapper.PLAIN:
            # A reactive callable returning a bare value reduces the stream.
            output_wrapper = Wrapper.MONO
        descriptor.update(
            output_type=output_type,
            output_wrapper=output_wrapper,
            output_is_message=output_is_message,
        )

    return FunctionType(**descriptor)


class FunctionInspector:
    """
    Answers type questions about cataloged callables.

    Accepts any object exposing a ``function_type`` attribute (the catalog's
    invocation wrappers); ``None`` is treated as "nothing resolved".
    """

    def is_message(self, function: Any) -> bool:
        if function is None:
            return False
        function_type = function.function_type
        return function_type.input_is_message or function_type.output_is_message

    def get_input_type(self, function: Any) -> Any:
        return function.function_type.input_type

    def get_input_wrapper(self, function: Any) -> Wrapper:
        return function.function_type.input_wrapper

    def get_output_type(self, function: Any) -> Any:
        return function.function_type.output_type

    def get_output_wrapper(self, function: Any) -> Wrapper:
        return function.function_type.output_wrapper

    def is_input_multiple(self, function: Any) -> bool:
        return is_collection(self.get_input_type(function)) or (
            self.get_input_wrapper(function) is Wrapper.FLUX
        )

    def is_output_single(self, function: Any) -> bool:
        if is_stream(self.get_output_type(function)):
            return False
        return self.get_output_wrapper(function) in (Wrapper.PLAIN, Wrapper.MONO, Wrapper.OPTIONAL)
