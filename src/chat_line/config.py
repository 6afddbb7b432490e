import sys
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field


class DisplaySettings(BaseModel):
    color: bool = True
    unknown_sender: str = "unknown"
    sender_style: str = "bold cyan"
    text_style: str = ""


class ChatConfig(BaseModel):
    """Configuration of a chat channel and its line source.

    Streams default to the process standard input/output, resolved once at construction. Passing
    `output=None` explicitly gives a channel that never renders anything.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    input: Any = Field(default_factory=lambda: sys.stdin, exclude=True)
    output: Any = Field(default_factory=lambda: sys.stdout, exclude=True)
    terminal: bool = True
    prompt: str = "> "
    username: Optional[str] = None
    display_settings: DisplaySettings = Field(default_factory=DisplaySettings)


def load_config(file_path: str, **overrides: Any) -> ChatConfig:
    """Loads chat settings from a YAML file.

    Streams cannot be described in YAML, pass them (or any other field) as keyword overrides.
    """
    with open(file_path, 'r') as file:
        config_data = yaml.safe_load(file) or {}
    config_data.update(overrides)
    return ChatConfig(**config_data)
