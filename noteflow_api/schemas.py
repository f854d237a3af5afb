from __future__ import annotations

from datetime import date
from typing import Optional, List, Literal

from pydantic import BaseModel, Field


class RegisterPayload(BaseModel):
    email: str
    password: str
    display_name: Optional[str] = None


class LoginPayload(BaseModel):
    email: str
    password: str


class ProfilePatch(BaseModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class SubTaskCreate(BaseModel):
    text: str
    completed: bool = False
    status: Optional[Literal["todo", "inProgress", "done"]] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class SubTaskPatch(BaseModel):
    text: Optional[str] = None
    completed: Optional[bool] = None
    status: Optional[Literal["todo", "inProgress", "done"]] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class TaskCreate(BaseModel):
    text: str
    completed: bool = False
    category: str = "personal"
    priority: bool = False
    due_date: Optional[date] = None
    notes: Optional[str] = None
    sub_tasks: List[SubTaskCreate] = Field(default_factory=list)


class TaskUpdate(BaseModel):
    text: str
    completed: bool
    category: str
    priority: bool
    due_date: Optional[date] = None
    notes: Optional[str] = None


class TaskPatch(BaseModel):
    text: Optional[str] = None
    completed: Optional[bool] = None
    category: Optional[str] = None
    priority: Optional[bool] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class TaskImportPayload(BaseModel):
    tasks: List[TaskCreate]


class UserSettingsPayload(BaseModel):
    current_mood: Optional[str] = None
    theme: Optional[Literal["light", "dark"]] = None
    focus_minutes: Optional[int] = Field(None, ge=1, le=120)
    break_minutes: Optional[int] = Field(None, ge=1, le=60)
    auto_start_breaks: Optional[bool] = None
    sound_enabled: Optional[bool] = None
    alarm_volume: Optional[int] = Field(None, ge=0, le=100)
    alarm: Optional[Literal["chiptune", "lofi", "retro"]] = None
    recent_searches: Optional[List[str]] = None


class LikedVideoPayload(BaseModel):
    video_id: str
    title: Optional[str] = None
    channel: Optional[str] = None


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    mood: str = "motivated"


class ChatResponse(BaseModel):
    reply: str
    used_fallback: bool
    tier: str
    model: Optional[str] = None


class FocusAssistRequest(BaseModel):
    task_text: str
    mood: str = "motivated"
    prompt_type: Optional[Literal["stuck", "breakdown", "motivation", "research"]] = None
    prompt: Optional[str] = None


class FocusAssistResponse(ChatResponse):
    prompt: str
    suggested_sub_tasks: List[str] = Field(default_factory=list)
