from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from services.mailbox_operations import MailboxOperations

LOGGER = logging.getLogger(__name__)


class ArgumentValidationError(ValueError):
    """Raised when call arguments do not match a function's input schema."""


class UnknownFunctionError(KeyError):
    """Raised when a call names a function that is not registered."""


class FunctionInput(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class FunctionOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ListUnreadEmailsInput(FunctionInput):
    limit: Optional[float] = Field(default=10, description="Number of emails to retrieve (default 10, max 20)")

    @field_validator("limit")
    @classmethod
    def _reject_nan(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and math.isnan(value):
            raise ValueError("limit must be a number")
        return value


class EmailSummaryOutput(FunctionOutput):
    id: str
    thread_id: str = Field(alias="threadId")
    subject: str
    sender: str = Field(alias="from")
    snippet: str = Field(description="Short preview of the email content")
    date: str


class ListUnreadEmailsOutput(FunctionOutput):
    emails: List[EmailSummaryOutput]


class GetThreadContentInput(FunctionInput):
    thread_id: str = Field(alias="threadId", description="The ID of the thread to retrieve")


class ThreadMessageOutput(FunctionOutput):
    sender: str = Field(alias="from")
    body: str = Field(description="The text content of the email")
    date: str


class GetThreadContentOutput(FunctionOutput):
    messages: List[ThreadMessageOutput]


class DraftReplyInput(FunctionInput):
    thread_id: str = Field(alias="threadId", description="The ID of the thread to reply to")
    message_id: Optional[str] = Field(
        default=None,
        alias="messageId",
        description="The ID of the specific message being replied to (optional, defaults to last in thread)",
    )
    to: str = Field(description="Recipient email address")
    subject: str = Field(description="Subject of the reply")
    body: str = Field(description="The content of the reply")


class DraftReplyOutput(FunctionOutput):
    draft_id: Optional[str] = Field(default=None, alias="draftId")
    success: bool


class CategorizeThreadInput(FunctionInput):
    thread_id: str = Field(alias="threadId", description="The ID of the thread to categorize")
    label_name: str = Field(
        alias="labelName",
        description=(
            "The name of the label to add (must ensure it exists or use standard ones like STARRED, IMPORTANT)"
        ),
    )


class CategorizeThreadOutput(FunctionOutput):
    success: bool


@dataclass(slots=True, frozen=True)
class FunctionSpec:
    name: str
    description: str
    handler: Callable[..., Any]
    input_model: Type[FunctionInput]
    output_model: Type[FunctionOutput]

    def input_fields(self) -> List[Tuple[str, str, bool]]:
        """Return ``(wire name, json type, required)`` for each input."""

        schema = self.input_model.model_json_schema()
        required = set(schema.get("required", []))
        fields = []
        for name, prop in schema.get("properties", {}).items():
            types = [prop["type"]] if "type" in prop else [item.get("type", "any") for item in prop.get("anyOf", [])]
            label = "/".join(kind for kind in types if kind != "null") or "any"
            fields.append((name, label, name in required))
        return fields

    def to_json_schema(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(),
            "outputSchema": self.output_model.model_json_schema(),
        }


def validate_arguments(spec: FunctionSpec, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Check ``arguments`` against the input model and return handler kwargs."""

    try:
        parsed = spec.input_model.model_validate(dict(arguments or {}))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}" for error in exc.errors()
        )
        raise ArgumentValidationError(f"{spec.name}: {problems}") from exc
    return parsed.model_dump()


@dataclass(slots=True)
class FunctionRegistry:
    service_name: str
    functions: Dict[str, FunctionSpec] = field(default_factory=dict)

    def register(self, spec: FunctionSpec) -> None:
        if spec.name in self.functions:
            raise ValueError(f"Function {spec.name} is already registered")
        self.functions[spec.name] = spec

    def get(self, name: str) -> FunctionSpec:
        try:
            return self.functions[name]
        except KeyError:
            available = ", ".join(sorted(self.functions))
            raise UnknownFunctionError(f"Unknown function '{name}'. Available functions: {available}") from None

    def __iter__(self) -> Iterator[FunctionSpec]:
        return iter(self.functions.values())

    def __len__(self) -> int:
        return len(self.functions)

    def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        spec = self.get(name)
        kwargs = validate_arguments(spec, arguments)
        LOGGER.debug("Calling %s with %s", name, sorted(kwargs))
        result = spec.output_model.model_validate(spec.handler(**kwargs).to_dict())
        return result.model_dump(by_alias=True, exclude_none=True)

    def to_json_schema(self) -> Dict[str, Any]:
        return {"service": self.service_name, "functions": [spec.to_json_schema() for spec in self]}


def build_registry(operations: MailboxOperations, service_name: str = "GmailAssistant") -> FunctionRegistry:
    registry = FunctionRegistry(service_name=service_name)
    registry.register(
        FunctionSpec(
            name="listUnreadEmails",
            description=(
                "List recent unread emails from the inbox to see what needs attention. "
                "Returns a simplified summary of emails."
            ),
            handler=operations.list_unread_emails,
            input_model=ListUnreadEmailsInput,
            output_model=ListUnreadEmailsOutput,
        )
    )
    registry.register(
        FunctionSpec(
            name="getThreadContent",
            description=(
                "Get the full content of an email thread to understand the context and summarize it. "
                "Prefers the plain-text body of each message."
            ),
            handler=operations.get_thread_content,
            input_model=GetThreadContentInput,
            output_model=GetThreadContentOutput,
        )
    )
    registry.register(
        FunctionSpec(
            name="draftReply",
            description="Draft a reply to a specific email thread. Does NOT send the email, only creates a draft.",
            handler=operations.draft_reply,
            input_model=DraftReplyInput,
            output_model=DraftReplyOutput,
        )
    )
    registry.register(
        FunctionSpec(
            name="categorizeThread",
            description="Categorize an email thread by adding a label (e.g., 'Work', 'Personal', 'Urgent').",
            handler=operations.categorize_thread,
            input_model=CategorizeThreadInput,
            output_model=CategorizeThreadOutput,
        )
    )
    return registry
