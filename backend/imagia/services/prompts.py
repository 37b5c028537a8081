"""
Prompt submission: authenticate the caller, relay to Ollama, store the answer.
"""
from typing import List, Optional

from imagia.config import settings
from imagia.core import events
from imagia.core.errors import ValidationError
from imagia.models.prompt_request import MODEL_NAME_MAX_LENGTH, PromptRequest
from imagia.services.auth import authenticate
from imagia.services.ollama import ollama_client


async def submit_prompt(
    user_id,
    token: str | None,
    prompt: Optional[str],
    images: Optional[List[str]] = None,
    model: Optional[str] = None,
    stream: bool = False,
    require_images: bool = False,
) -> PromptRequest:
    """
    Relay ``prompt`` (and ``images``) for an authenticated user and persist the exchange.

    Quota is not consumed here; clients consume it through the quota endpoint.
    """
    if not prompt or not prompt.strip():
        raise ValidationError("prompt is required", category="PROMPT")
    if require_images and not images:
        raise ValidationError("At least one image is required", category="PROMPT")

    user = await authenticate(user_id, token, category="PROMPT")
    model_name = model or settings.ollama_model
    if len(model_name) > MODEL_NAME_MAX_LENGTH:
        raise ValidationError(f"model must be at most {MODEL_NAME_MAX_LENGTH} characters", category="PROMPT")

    answer = await ollama_client.generate(prompt, images=images, model=model_name, stream=stream)

    request = await PromptRequest.create(user=user, prompt=prompt, answer=answer, model=model_name)
    await events.info(
        "PROMPT",
        f"Request {request.id} by user {user.id} on {model_name} "
        f"({len(images or [])} images, {len(answer)} chars answered)",
    )
    return request
