"""Configuration model for ptyblock."""

from typing import Literal

from pydantic import BaseModel, Field

DrainPolicyName = Literal["auto", "poll", "select"]
CloseOrderName = Literal["auto", "device_first", "after_drain"]


class CaptureConfig(BaseModel):
    """Runtime configuration for capture sessions."""

    drain_policy: DrainPolicyName = Field(
        default="auto",
        description=(
            "How the controller is drained: 'poll' reads until no data is available, "
            "'select' blocks until the device side reports end-of-stream. "
            "'auto' picks 'poll' on macOS and 'select' elsewhere."
        ),
    )
    close_order: CloseOrderName = Field(
        default="auto",
        description=(
            "When the device side is closed relative to draining: 'device_first' closes it "
            "before draining, 'after_drain' once draining is done. "
            "'auto' picks 'after_drain' on macOS and 'device_first' elsewhere."
        ),
    )
    chunk_size: int = Field(default=1024, gt=0, description="Bytes requested per controller read.")
    encoding: str = Field(
        default="utf-8",
        description="Character encoding used to decode captured output.",
    )
    idle_timeout: float = Field(
        default=0.05,
        gt=0,
        description="Seconds the poll drain waits for more data before finishing.",
    )
    select_timeout: float | None = Field(
        default=5.0,
        gt=0,
        description=(
            "Seconds the select drain waits for readiness before giving up. "
            "None waits indefinitely."
        ),
    )
