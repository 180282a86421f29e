"""
Intent Router

Routes utterances to registered intent handlers. The model picks the intent
and extracts entities through function calling (first pass); the handler's
result is then handed back to the model to be rendered in the requested
response format (second pass).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import structlog
from pydantic import BaseModel

from openaci.config import LLMConfig, get_config
from openaci.formats import ResponseFormat
from openaci.intent.schema import (
    FALLBACK_FUNCTION_NAME,
    CannotFulfillIntent,
    MetadataParameters,
    compose_parameters,
    serialize_output,
    split_arguments,
    to_function_name,
)
from openaci.llm.gateway import (
    AciError,
    LLMGateway,
    Message,
    ModelClient,
    Role,
    ToolCall,
    ToolSpec,
)
from openaci.llm.providers import get_provider

logger = structlog.get_logger(__name__)

DEFAULT_TEMPERATURE = 0.0
DEFAULT_SEED = 0

CLASSIFY_PROMPT = """
Analyze the following utterance and identify the intent, entities and any other relevant information.
Then, call the appropriate tool.
If an output format is not specified, provide a textual response.
If a structured output is required, but no format is provided, use YAML as the default format.
If there is no tool to fulfill the intent, call the `cannot_fulfill_intent` tool with "Sorry, I don't have the capability to {fulfill the intent}.", still respecting the desired output format (if specified).
Don't improvise or make up a response.""".strip()


def format_prompt(response_format: ResponseFormat, structured_schema: str | None = None) -> str:
    """System instruction for the second (formatting) pass."""
    if response_format == ResponseFormat.AUDIO_MP3:
        lines = ["Fulfill the user's intent by providing a short plain-text response that will be read aloud."]
    elif response_format == ResponseFormat.IMAGE_PNG:
        lines = [
            "Fulfill the user's intent by describing a single image that conveys the result.",
            "Reply only with the description; it will be used as an image generation prompt.",
        ]
    elif response_format.is_structured:
        lines = [
            f"Fulfill the user's intent by providing a {response_format.value} response "
            f"(strictly valid {response_format.subtype.upper()}, nothing else)."
        ]
        if structured_schema:
            lines.append(f"Use the following schema: {structured_schema}")
    else:
        lines = [f"Fulfill the user's intent by providing a {response_format.value} response."]
    return "\n".join(lines)


class NoToolCallError(AciError):
    """The model answered without choosing any tool."""


class UnknownIntentError(AciError):
    """The model chose a tool that matches no registered intent."""

    def __init__(self, function_name: str):
        super().__init__(f"Function '{function_name}' not matching any intent definition")
        self.function_name = function_name


@dataclass
class IntentRequest:
    """What a handler receives."""

    utterance: str
    intent: str
    entities: Any


# Handler type: async function that takes the request and returns any serializable value
IntentHandler = Callable[[IntentRequest], Awaitable[Any]]


@dataclass
class IntentSpec:
    """A registered intent."""

    intent: str
    schema: type[BaseModel]
    handler: IntentHandler | None


@dataclass
class IntentResponse:
    """Final result of handling an utterance."""

    response_format: ResponseFormat
    output: str

    def to_dict(self) -> dict:
        return {"response_format": self.response_format.value, "output": self.output}


@dataclass
class ToolSelection:
    """Outcome of the classification pass."""

    call: ToolCall
    spec: IntentSpec
    metadata: MetadataParameters
    entities: BaseModel | None
    assistant_message: Message

    @property
    def is_fallback(self) -> bool:
        return self.call.name == FALLBACK_FUNCTION_NAME


class IntentRouter:
    """
    Registry of intents plus the two-pass dispatch around a model client.

    Usage:
        router = IntentRouter(model="gpt-4o-mini")

        @router.intent("Convert name to base64", Name)
        async def encode(request: IntentRequest) -> str:
            ...

        response = await router.handle("please base64 encode Alice")
    """

    def __init__(
        self,
        model: str | None = None,
        client: ModelClient | Any = None,
        temperature: float | None = None,
        seed: int | None = None,
        max_tokens: int | None = None,
        config: LLMConfig | None = None,
    ):
        """
        Initialize the router.

        Args:
            model: Model identifier (defaults to configuration)
            client: A ModelClient, or a pre-configured provider SDK client
            temperature: Sampling temperature (default 0)
            seed: Sampling seed (default 0)
            max_tokens: Maximum output tokens per model call
            config: LLM settings used for anything not passed explicitly
        """
        llm = config or get_config().llm

        self.model = model or llm.model
        self.temperature = llm.temperature if temperature is None else temperature
        self.seed = llm.seed if seed is None else seed
        self.max_tokens = llm.max_tokens if max_tokens is None else max_tokens

        if client is None or not hasattr(client, "complete"):
            # Build a provider, wrapping the SDK client if one was given
            client = get_provider(
                llm.provider,
                api_key=llm.api_key,
                model=self.model,
                base_url=llm.base_url,
                client=client,
                image_model=llm.image_model,
                speech_model=llm.speech_model,
                speech_voice=llm.speech_voice,
            )
        self.llm = client if isinstance(client, LLMGateway) else LLMGateway(client)

        self._intents: dict[str, IntentSpec] = {
            FALLBACK_FUNCTION_NAME: IntentSpec(
                intent=FALLBACK_FUNCTION_NAME,
                schema=CannotFulfillIntent,
                handler=None,
            ),
        }

    @property
    def intents(self) -> dict[str, IntentSpec]:
        """Registered intents keyed by function name."""
        return dict(self._intents)

    def register(self, label: str, schema: type[BaseModel], handler: IntentHandler) -> None:
        """Register a handler for an intent label. Replaces any intent with the same function name."""
        if not label or not label.strip():
            raise ValueError("Intent label must not be empty")

        function_name = to_function_name(label)
        if not function_name:
            raise ValueError(f"Intent label {label!r} has no usable characters")
        if function_name == FALLBACK_FUNCTION_NAME:
            raise ValueError(f"'{FALLBACK_FUNCTION_NAME}' is reserved")

        self._intents[function_name] = IntentSpec(intent=label, schema=schema, handler=handler)
        logger.debug("intent_registered", intent=label, function=function_name)

    def intent(self, label: str, schema: type[BaseModel]) -> Callable[[IntentHandler], IntentHandler]:
        """Decorator form of register()."""

        def decorator(handler: IntentHandler) -> IntentHandler:
            self.register(label, schema, handler)
            return handler

        return decorator

    def tools(self) -> list[ToolSpec]:
        """One tool per registered intent, fallback included."""
        return [
            ToolSpec(
                name=function_name,
                description=spec.intent,
                parameters=compose_parameters(spec.schema),
            )
            for function_name, spec in self._intents.items()
        ]

    async def classify(self, utterance: str) -> ToolSelection:
        """
        First pass: let the model pick an intent and extract its entities.

        Raises:
            NoToolCallError: the model did not call any tool
            UnknownIntentError: the tool name matches no registered intent
        """
        messages = [
            Message(role=Role.SYSTEM, content=CLASSIFY_PROMPT),
            Message(role=Role.USER, content=utterance),
        ]

        response = await self.llm.complete(
            messages=messages,
            tools=self.tools(),
            tool_choice="required",
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            seed=self.seed,
        )

        if not response.tool_calls:
            # Should not happen, cannot_fulfill_intent is always offered
            logger.error(
                "no_tool_call",
                content=response.content,
                finish_reason=response.finish_reason,
            )
            raise NoToolCallError("No intent definition found")

        if len(response.tool_calls) > 1:
            logger.warning(
                "extra_tool_calls_ignored",
                chosen=response.tool_calls[0].name,
                ignored=[call.name for call in response.tool_calls[1:]],
            )

        call = response.tool_calls[0]
        spec = self._intents.get(call.name)
        if spec is None:
            logger.error("unknown_intent", function=call.name, arguments=call.arguments)
            raise UnknownIntentError(call.name)

        arguments = json.loads(call.arguments or "{}")
        metadata_fields, entity_fields = split_arguments(arguments)
        if not metadata_fields.get("response_format"):
            metadata_fields["response_format"] = ResponseFormat.TEXT_PLAIN.value
        metadata = MetadataParameters.model_validate(metadata_fields)

        entities = None
        if call.name != FALLBACK_FUNCTION_NAME:
            entities = spec.schema.model_validate(entity_fields)

        logger.info(
            "intent_classified",
            intent=spec.intent,
            function=call.name,
            response_format=metadata.response_format.value,
        )

        return ToolSelection(
            call=call,
            spec=spec,
            metadata=metadata,
            entities=entities,
            assistant_message=Message(
                role=Role.ASSISTANT,
                content=response.content,
                tool_calls=[call],
            ),
        )

    async def fulfill(self, utterance: str, selection: ToolSelection) -> IntentResponse:
        """
        Second pass: run the handler and have the model format its result.

        The fallback intent short-circuits with the model's apology message.
        An apology requested as audio or an image is returned as plain text,
        since no speech or image is generated for it.
        """
        response_format = selection.metadata.response_format

        if selection.is_fallback:
            logger.info("intent_not_fulfilled", message=selection.metadata.message)
            if response_format.is_binary:
                response_format = ResponseFormat.TEXT_PLAIN
            return IntentResponse(
                response_format=response_format,
                output=selection.metadata.message or "",
            )

        spec = selection.spec
        logger.debug("intent_handler_invoked", intent=spec.intent)
        result = await spec.handler(IntentRequest(
            utterance=utterance,
            intent=spec.intent,
            entities=selection.entities,
        ))

        messages = [
            Message(
                role=Role.SYSTEM,
                content=format_prompt(response_format, selection.metadata.structured_schema),
            ),
            Message(role=Role.USER, content=utterance),
            selection.assistant_message,
            Message(
                role=Role.TOOL,
                content=serialize_output(result),
                tool_call_id=selection.call.id,
            ),
        ]

        # Replayed tool blocks must be matched by declared tools.
        response = await self.llm.complete(
            messages=messages,
            tools=self.tools(),
            tool_choice="none",
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            seed=self.seed,
        )
        output = response.content or ""

        if response_format == ResponseFormat.AUDIO_MP3:
            output = await self.llm.synthesize_speech(output)
        elif response_format == ResponseFormat.IMAGE_PNG:
            output = await self.llm.generate_image(output)

        logger.info(
            "intent_fulfilled",
            intent=spec.intent,
            response_format=response_format.value,
            output_length=len(output),
        )
        return IntentResponse(response_format=response_format, output=output)

    async def handle(self, utterance: str) -> IntentResponse:
        """Classify an utterance and fulfill it."""
        if not utterance or not utterance.strip():
            raise ValueError("Utterance must not be empty")

        selection = await self.classify(utterance)
        return await self.fulfill(utterance, selection)
