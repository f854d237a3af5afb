from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from noteflow_api.auth import require_backend_token
from noteflow_api.moods import MOODS, assistant_system_prompt, focus_system_prompt, normalize_mood
from noteflow_api.schemas import ChatRequest, ChatResponse, FocusAssistRequest, FocusAssistResponse
from noteflow_api.services import llm_gateway
from noteflow_api.task_rules import extract_suggested_sub_tasks

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_backend_token)])

FOCUS_PROMPTS = {
    "stuck": 'I\'m stuck on this task: "{task}". Can you give me some suggestions to move forward?',
    "breakdown": 'Can you help me break down this task into smaller sub-tasks? Task: "{task}"',
    "motivation": 'I need some motivation to complete this task: "{task}". My current mood is {mood}.',
    "research": 'Can you provide a brief summary or steps on how to approach this task? Task: "{task}"',
}


def build_focus_prompt(prompt_type: str | None, task_text: str, mood: str, custom: str | None = None) -> str:
    template = FOCUS_PROMPTS.get(prompt_type or "")
    if template:
        return template.format(task=task_text, mood=MOODS[normalize_mood(mood)]["label"])
    return (custom or "").strip()


@router.post("/v1/chat", response_model=ChatResponse)
async def chat(payload: ChatRequest):
    history = [message.model_dump() for message in payload.messages if message.role != "system"]
    if not history:
        raise HTTPException(status_code=400, detail="At least one message is required")
    messages = [{"role": "system", "content": assistant_system_prompt(payload.mood)}] + history
    result = await llm_gateway.chat_completion(messages)
    if result["used_fallback"]:
        logger.info("Chat answered by %s tier", result["tier"])
    return result


@router.post("/v1/chat/focus", response_model=FocusAssistResponse)
async def focus_assist(payload: FocusAssistRequest):
    task_text = payload.task_text.strip()
    if not task_text:
        raise HTTPException(status_code=400, detail="Task text cannot be empty")
    prompt = build_focus_prompt(payload.prompt_type, task_text, payload.mood, payload.prompt)
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt cannot be empty")
    messages = [
        {"role": "system", "content": focus_system_prompt(payload.mood, task_text)},
        {"role": "user", "content": prompt},
    ]
    result = await llm_gateway.chat_completion(messages)
    suggestions = []
    if payload.prompt_type == "breakdown":
        suggestions = extract_suggested_sub_tasks(result["reply"])
    return {**result, "prompt": prompt, "suggested_sub_tasks": suggestions}
