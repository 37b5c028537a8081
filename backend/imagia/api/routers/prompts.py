from fastapi import APIRouter, Depends, status

from imagia.api.deps import bearer_token, pick_token
from imagia.core import events
from imagia.core.envelope import ok
from imagia.schemas.prompt import PromptIn
from imagia.services.ollama import ollama_client
from imagia.services.prompts import submit_prompt

router = APIRouter(tags=["prompts"])


def _request_to_dict(req, user_id: int) -> dict:
    return {
        "requestId": req.id,
        "userId": user_id,
        "prompt": req.prompt,
        "response": req.answer,
    }


@router.api_route("/models", methods=["GET", "POST"])
async def list_models():
    """
    List the models pulled on the Ollama server.

    Returns:
        Envelope with ``{total_models, models: [{name, modified_at, size, digest}]}``

    Error codes:
        - 502: Ollama unreachable or answered with an error
    """
    models = await ollama_client.list_models()
    await events.info("MODELS", f"Listed {len(models)} models")
    return ok("Models retrieved", {"total_models": len(models), "models": models})


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate(body: PromptIn, header_token: str | None = Depends(bearer_token)):
    """
    Submit a text prompt (images optional) and store the answer.

    Error codes:
        - 400: Missing prompt or userId
        - 401: Bad token
        - 404: Unknown user
        - 502: Generation failed
    """
    req = await submit_prompt(
        body.userId,
        pick_token(header_token, body.token),
        body.prompt,
        images=body.images,
        model=body.model,
        stream=body.stream,
    )
    return ok("Prompt processed", _request_to_dict(req, body.userId))


@router.post("/analitzar-imatge", status_code=status.HTTP_201_CREATED)
async def analyze_image(body: PromptIn, header_token: str | None = Depends(bearer_token)):
    """
    Submit a prompt with at least one base64 image to a vision model.

    Same contract as ``/generate`` plus a 400 when ``images`` is empty.
    """
    req = await submit_prompt(
        body.userId,
        pick_token(header_token, body.token),
        body.prompt,
        images=body.images,
        model=body.model,
        stream=body.stream,
        require_images=True,
    )
    return ok("Image analysed", _request_to_dict(req, body.userId))
