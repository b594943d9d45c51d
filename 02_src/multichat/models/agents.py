"""Agent descriptor models."""

from dataclasses import dataclass
from enum import Enum


class Producer(str, Enum):
    """Vendors with a streaming adapter."""

    OPENAI = "OpenAI"
    ANTHROPIC = "Anthropic"
    GOOGLE = "Google"


@dataclass(frozen=True)
class Agent:
    """A named model endpoint that can answer or compare."""

    id: str
    producer: Producer
    model: str
    name: str
    description: str = ""
    image: str = ""

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "id": self.id,
            "producer": self.producer.value,
            "model": self.model,
            "name": self.name,
            "description": self.description,
            "image": self.image,
        }
