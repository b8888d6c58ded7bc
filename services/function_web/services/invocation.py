"""
Function invocation wrapper.

Adapts any registered callable (plain or reactive, sync or async) to a
uniform stream-in / stream-out contract used by the web layer and the
supplier exporter.
"""

import inspect
import logging
from collections.abc import Iterator
from typing import Any, AsyncIterator, Optional

from starlette.concurrency import iterate_in_threadpool, run_in_threadpool

from ..models.function import FunctionKind, FunctionType, Wrapper
from ..models.message import Message
from .function_inspector import is_stream

logger = logging.getLogger("function_web.invocation")


class FunctionInvocationWrapper:
    def __init__(
        self,
        name: str,
        target: Any,
        function_type: FunctionType,
        attributes_provider: Optional[Any] = None,
    ):
        """
        Args:
            name: Catalog name of the callable
            target: The user callable
            function_type: Descriptor resolved at registration
            attributes_provider: Cloud event attributes provider used to
                enrich results of functions invoked with a cloud event
        """
        self.name = name
        self.target = target
        self.function_type = function_type
        self.attributes_provider = attributes_provider

    @property
    def kind(self) -> FunctionKind:
        return self.function_type.kind

    def __repr__(self) -> str:
        return f"FunctionInvocationWrapper(name={self.name!r}, kind={self.kind.value})"

    # ===========================================
    # Public contract
    # ===========================================

    def apply(self, stream: AsyncIterator[Any]) -> AsyncIterator[Any]:
        """Apply a function to an input stream, producing an output stream."""
        if self.function_type.reactive:
            return self._apply_reactive(stream)
        return self._apply_each(stream)

    async def accept(self, stream: AsyncIterator[Any]) -> None:
        """Feed an input stream to a consumer until it is exhausted."""
        if self.function_type.reactive:
            result = self.target(self._arguments(stream))
            if inspect.isawaitable(result):
                await result
            return
        async for item in stream:
            await self._call(self._argument(item))

    async def get(self) -> AsyncIterator[Any]:
        """Produce the items of a supplier."""
        result = await self._call()
        async for output in self._outputs(result):
            yield output

    # ===========================================
    # Internals
    # ===========================================

    async def _apply_each(self, stream: AsyncIterator[Any]) -> AsyncIterator[Any]:
        async for item in stream:
            input_message = item if isinstance(item, Message) else None
            result = await self._call(self._argument(item))
            async for output in self._outputs(result):
                yield self._enrich(input_message, output)

    async def _apply_reactive(self, stream: AsyncIterator[Any]) -> AsyncIterator[Any]:
        result = self.target(self._arguments(stream))
        if inspect.isawaitable(result):
            result = await result
        async for output in self._outputs(result):
            yield output

    async def _arguments(self, stream: AsyncIterator[Any]) -> AsyncIterator[Any]:
        async for item in stream:
            yield self._argument(item)

    def _argument(self, item: Any) -> Any:
        if self.function_type.input_is_message:
            return item if isinstance(item, Message) else Message.create(item)
        return item.payload if isinstance(item, Message) else item

    async def _call(self, *args: Any) -> Any:
        if inspect.iscoroutinefunction(self.target) or inspect.isasyncgenfunction(self.target):
            result = self.target(*args)
        else:
            result = await run_in_threadpool(self.target, *args)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _outputs(self, result: Any) -> AsyncIterator[Any]:
        if result is None:
            return
        if self.function_type.output_wrapper is Wrapper.FLUX or hasattr(result, "__aiter__"):
            async for output in result:
                if output is not None:
                    yield output
        elif isinstance(result, Iterator) and (
            is_stream(self.function_type.output_type) or inspect.isgenerator(result)
        ):
            # Generator bodies run on the threadpool.
            async for output in iterate_in_threadpool(result):
                if output is not None:
                    yield output
        else:
            yield result

    def _enrich(self, input_message: Optional[Message], output: Any) -> Any:
        if input_message is None or self.attributes_provider is None:
            return output
        if isinstance(output, Message):
            return output
        headers = self.attributes_provider.generate_default_cloud_event_headers(
            input_message, output
        )
        return Message(output, headers) if headers else output
