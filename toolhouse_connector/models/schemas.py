"""
Pydantic schemas for API requests and responses.
Includes enums for operations, visibility and output lanes.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Any, List
from enum import Enum, IntEnum


# ============================================================================
# Enums
# ============================================================================


class Operation(str, Enum):
    """Conversation operations a workflow item can request"""

    START = "start"
    CONTINUE = "continue"


class Visibility(str, Enum):
    """Agent visibility as reported by the metadata API"""

    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def is_public(self) -> bool:
        return self is Visibility.PUBLIC


class Lane(IntEnum):
    """Output lanes of the conversation step"""

    SUCCESS = 0
    FAILURE = 1


class WebhookLane(IntEnum):
    """Output lanes of the callback webhook"""

    COMPLETED = 0
    FAILED = 1


# Response header carrying the conversation run identifier
RUN_ID_HEADER = "x-toolhouse-run-id"

# Callback status that counts as success; every other value is a failure
COMPLETED_STATUS = "completed"


# ============================================================================
# Toolhouse Metadata
# ============================================================================


class Agent(BaseModel):
    """Agent metadata returned by GET /agents and GET /agents/{id}"""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    title: str = ""
    # Kept raw: only a literal boolean false marks an agent private
    public: Optional[Any] = None

    @field_validator("id", "title", mode="before")
    @classmethod
    def text_or_empty(cls, value):
        return "" if value is None else str(value)

    @property
    def visibility(self) -> Visibility:
        return visibility_from_metadata({"public": self.public})


def visibility_from_metadata(metadata: Any) -> Visibility:
    """Default-open: anything but an explicit `public: false` is public."""
    if isinstance(metadata, dict) and metadata.get("public") is False:
        return Visibility.PRIVATE
    return Visibility.PUBLIC


class AgentOption(BaseModel):
    """Selectable option produced by the agent catalog"""

    name: str
    value: str
    description: Optional[str] = None


# ============================================================================
# Conversation Step
# ============================================================================


class ExecutionItem(BaseModel):
    """One unit of work for the conversation step"""

    model_config = ConfigDict(populate_by_name=True)

    operation: Operation = Field(default=Operation.START, description="start or continue")
    agent_id: str = Field(default="", alias="agentId", description="Toolhouse agent identifier")
    message: str = Field(default="", description="Message to send to the agent")
    run_id: str = Field(default="", alias="runId", description="Run ID for continuing a conversation")

    @field_validator("agent_id", "message", "run_id", mode="before")
    @classmethod
    def text_or_empty(cls, value):
        # null counts as absent; the item is still sent and routed
        return "" if value is None else value

    @property
    def input_run_id(self) -> str:
        """Run identifier the item carries into the call; start items carry none."""
        return self.run_id if self.operation is Operation.CONTINUE else ""


class ErrorDetail(BaseModel):
    """Structured error placed in the response of a failed item"""

    message: str
    status: Optional[int] = None
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


class OutcomeRecord(BaseModel):
    """Per-item result emitted on exactly one output lane"""

    model_config = ConfigDict(populate_by_name=True)

    response: Optional[Any] = None
    run_id: str = Field(default="", alias="runId")
    agent_id: str = Field(default="", alias="agentId")
    public: bool = True

    def to_output(self) -> dict:
        """Output shape: {response, runId, agentId, public}"""
        return self.model_dump(by_alias=True, mode="json")


class RoutedOutcome(BaseModel):
    """An outcome record tagged with the lane it belongs to"""

    lane: Lane
    record: OutcomeRecord


class ExecutionRequest(BaseModel):
    """Request model for running the conversation step"""

    items: List[ExecutionItem] = Field(default_factory=list)


class ExecutionResult(BaseModel):
    """Both output lanes of one invocation, each in input order"""

    success: List[OutcomeRecord] = Field(default_factory=list)
    failure: List[OutcomeRecord] = Field(default_factory=list)

    def append(self, routed: RoutedOutcome):
        if routed.lane is Lane.SUCCESS:
            self.success.append(routed.record)
        else:
            self.failure.append(routed.record)

    @property
    def total(self) -> int:
        return len(self.success) + len(self.failure)


# ============================================================================
# Webhook
# ============================================================================


class WebhookCallback(BaseModel):
    """Run status notification posted by Toolhouse"""

    run_id: Optional[str] = None
    status: Optional[str] = None
    last_agent_message: Optional[str] = None

    @field_validator("run_id", "status", "last_agent_message", mode="before")
    @classmethod
    def coerce_to_string(cls, value):
        # Non-string scalars are kept (as text) so they still reach a lane
        if value is None or isinstance(value, str):
            return value
        return str(value)


class WebhookPayload(BaseModel):
    """Inbound webhook body: {data: {run_id, status, last_agent_message}}"""

    data: WebhookCallback


class WebhookResult(BaseModel):
    """Webhook lanes; exactly one of them holds the callback"""

    completed: List[WebhookCallback] = Field(default_factory=list)
    failed: List[WebhookCallback] = Field(default_factory=list)


# ============================================================================
# Credentials / Health
# ============================================================================


class CredentialTestRequest(BaseModel):
    token: str = Field(..., min_length=1)


class CredentialTestResponse(BaseModel):
    valid: bool
    message: str


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    timestamp: float
