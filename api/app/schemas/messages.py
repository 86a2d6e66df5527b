from typing import Literal

from .common import CamelModel


class Message(CamelModel):
    id: str
    type: Literal["notice", "alert", "conversation", "transfer"]
    title: str
    body: str = ""
    time: str
    icon: Literal["mail", "alert"] | None = None
    avatar: str | None = None


class Insight(CamelModel):
    id: str
    title: str
    body: str = ""
    category: str | None = None


class MessagesResponse(CamelModel):
    messages: list[Message]


class InsightsResponse(CamelModel):
    insights: list[Insight]
