"""
Function controller.

Where: Behind the catch-all GET/POST routes.
What: Turns an InputContext into an input stream for the resolved callable
      and shapes the output stream into an HTTP response.
Why: Keeps request coercion and response cardinality rules out of the
     route handlers so they can be tested without FastAPI.
"""

import json
import logging
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Tuple

from starlette.background import BackgroundTask
from starlette.responses import Response, StreamingResponse

from ..cloudevent import message_utils
from ..core import header_utils
from ..core.exceptions import InputConversionError, InvalidInvocationError
from ..core.json_mapper import JsonMapper, StringConverter
from ..core.utils import json_bytes, render_body, sse_event
from ..models.context import EVENT_STREAM, InputContext
from ..models.form import FormRequest
from ..models.message import Message
from ..models.target_function import FunctionTarget
from .function_inspector import FunctionInspector, is_collection

logger = logging.getLogger("function_web.controller")


class FunctionController:
    def __init__(
        self,
        mapper: JsonMapper,
        inspector: FunctionInspector,
        converter: StringConverter,
        debug: bool = False,
    ):
        """
        Args:
            mapper: JSON mapper used for list/object bodies
            inspector: Type inspector for cataloged callables
            converter: Scalar string converter
            debug: Log every input and output item
        """
        self.mapper = mapper
        self.inspector = inspector
        self.converter = converter
        self.debug = debug

    # ===========================================
    # Entry points
    # ===========================================

    async def post(self, context: InputContext, target: FunctionTarget) -> Response:
        """
        Invoke a function or consumer with the request body.

        Raises:
            InvalidInvocationError: neither a function nor a consumer resolved
            InputConversionError: the body does not fit the declared input type
        """
        handler = target.function or target.consumer
        if handler is None:
            raise InvalidInvocationError()

        headers = header_utils.from_http(context.headers)
        payloads, single = self._coerce(context, handler, headers)

        if self.inspector.is_message(handler) or message_utils.is_binary(headers):
            inputs: List[Any] = [Message.create(payload, headers) for payload in payloads]
        else:
            inputs = payloads

        if target.function is None:
            logger.debug(f"Handled POST with consumer '{target.name}'")
            return Response(
                status_code=202,
                background=BackgroundTask(self._consume, target.consumer, inputs),
            )

        logger.debug(f"Handled POST with function '{target.name}'")
        outputs = target.function.apply(self._stream(inputs))
        return await self.response(context, target.function, outputs, single, getter=False)

    async def get(self, context: InputContext, target: FunctionTarget) -> Response:
        """
        Invoke a supplier, or a function applied to the path argument.

        Raises:
            InvalidInvocationError: neither a function nor a supplier resolved
        """
        if target.function is not None:
            function = target.function
            try:
                value = self.converter.convert(function, target.argument)
            except (ValueError, TypeError) as e:
                raise InputConversionError(target.name, e) from e
            if self.inspector.is_message(function):
                value = Message.create(value, header_utils.from_http(context.headers))

            logger.debug(f"Handled GET with function '{target.name}'")
            outputs = function.apply(self._stream([value]))
            if context.wants_event_stream:
                return self._event_stream(outputs)
            return await self._single(outputs)

        if target.supplier is not None:
            logger.debug(f"Handled GET with supplier '{target.name}'")
            return await self.response(context, target.supplier, target.supplier.get(), None, True)

        raise InvalidInvocationError()

    # ===========================================
    # Response shaping
    # ===========================================

    async def response(
        self,
        context: InputContext,
        function: Any,
        outputs: AsyncIterator[Any],
        single: Optional[bool],
        getter: bool,
    ) -> Response:
        """
        Shape an output stream into a response.

        One value is returned when the output is single-valued and the input
        was a single value, a multi-valued input, or a supplier call; a list
        otherwise. ``Accept: text/event-stream`` streams every item instead.
        """
        if context.wants_event_stream:
            return self._event_stream(outputs)

        output_single = self.inspector.is_output_single(function)
        if output_single and (
            single
            or (getter and single is None)
            or self.inspector.is_input_multiple(function)
        ):
            return await self._single(outputs)

        headers: Dict[str, str] = {}
        items = [self._unwrap(item, headers) async for item in outputs]
        return Response(
            content=json_bytes(items),
            status_code=200,
            headers=headers,
            media_type="application/json",
        )

    async def _single(self, outputs: AsyncIterator[Any]) -> Response:
        headers: Dict[str, str] = {}
        async for item in outputs:
            value = self._unwrap(item, headers)
            break
        else:
            return Response(status_code=200)
        await _close(outputs)
        content, media_type = render_body(value)
        return Response(content=content, status_code=200, headers=headers, media_type=media_type)

    def _event_stream(self, outputs: AsyncIterator[Any]) -> StreamingResponse:
        async def frames():
            async for item in outputs:
                yield sse_event(self._unwrap(item, None))

        return StreamingResponse(frames(), media_type=EVENT_STREAM)

    def _unwrap(self, item: Any, headers: Optional[Dict[str, str]]) -> Any:
        if self.debug:
            logger.info(f"Output item: {item!r}")
        if not isinstance(item, Message):
            return item
        if headers is not None:
            headers.update(header_utils.from_message(item.headers))
        return item.payload

    # ===========================================
    # Request coercion
    # ===========================================

    def _coerce(
        self, context: InputContext, handler: Any, headers: Dict[str, Any]
    ) -> Tuple[List[Any], Optional[bool]]:
        """
        Convert the body into payloads.

        Returns:
            (payloads, single): ``single`` is True for one explicit value,
            False for a list body and None when the body was empty
        """
        try:
            return self._parse_body(context, handler, headers)
        except (ValueError, TypeError) as e:
            raise InputConversionError(getattr(handler, "name", "function"), e) from e

    def _parse_body(
        self, context: InputContext, handler: Any, headers: Dict[str, Any]
    ) -> Tuple[List[Any], Optional[bool]]:
        input_type = self.inspector.get_input_type(handler)
        body = context.body.strip()

        if message_utils.is_structured(context.content_type):
            return [self._structured(body, input_type, headers)], True

        if not body:
            form = FormRequest.from_params(context.query_params, context.form_params)
            if form.is_empty():
                return [], None
            return [self.mapper.convert_value(form.payload(), input_type)], True

        if body.startswith("["):
            if is_collection(input_type):
                return [self.mapper.to_single(body, input_type)], None
            return self.mapper.to_list(body, input_type), False
        if body.startswith("{"):
            return [self.mapper.to_single(body, input_type)], True
        if body.startswith('"'):
            # Shallow unquote; escape sequences are left untouched.
            body = body[1:-2]
        return [self.converter.convert(handler, body)], True

    def _structured(self, body: str, input_type: Any, headers: Dict[str, Any]) -> Any:
        event = json.loads(body or "{}")
        if not isinstance(event, Mapping):
            raise ValueError("structured cloud event must be a JSON object")
        headers.update(message_utils.from_structured(event))
        return self.mapper.convert_value(event.get(message_utils.DATA), input_type)

    # ===========================================
    # Streams
    # ===========================================

    async def _stream(self, items: List[Any]) -> AsyncIterator[Any]:
        for item in items:
            if self.debug:
                logger.info(f"Input item: {item!r}")
            yield item

    async def _consume(self, consumer: Any, items: List[Any]) -> None:
        try:
            await consumer.accept(self._stream(items))
        except Exception as e:
            logger.error(f"Consumer '{consumer.name}' failed: {e}", exc_info=True)


async def _close(stream: AsyncIterator[Any]) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()
