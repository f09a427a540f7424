from pydantic import BaseModel, Field

MAX_REPLAY_KEYS = 200
MAX_KEY_LENGTH = 32


class KeyPressRequest(BaseModel):
    key: str = Field(
        ...,
        max_length=MAX_KEY_LENGTH,
        description="Key pressed on the keypad; anything but a single known character shows ERROR.",
    )


class ScreenResponse(BaseModel):
    sessionId: str = Field(..., description="Keypad session identifier.")
    screen: str = Field(..., description="Current display text of the keypad.")
    errored: bool = Field(..., description="Whether the keypad is showing ERROR.")


class ReplayRequest(BaseModel):
    keys: str = Field(
        ...,
        max_length=MAX_REPLAY_KEYS,
        description="Characters pressed in order on a fresh keypad.",
    )


class ReplayResponse(BaseModel):
    keys: str = Field(..., description="The characters that were pressed.")
    screen: str = Field(..., description="Display text after the last key.")
    errored: bool = Field(..., description="Whether the keypad ended on ERROR.")
