"""HTTP surface implementing the cert-manager webhook solver API."""

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from porkbun_webhook import __version__
from porkbun_webhook._logging import get_logger
from porkbun_webhook.exceptions import WebhookError
from porkbun_webhook.models import (
    ChallengeAction,
    ChallengePayload,
    ChallengeRequest,
    ChallengeResponse,
    Status,
)
from porkbun_webhook.solver import PorkbunSolver

logger = get_logger(__name__)

API_VERSION = "v1alpha1"


def handle_challenge(solver: PorkbunSolver, ch: ChallengeRequest) -> ChallengeResponse:
    """Run one challenge action and wrap the outcome for cert-manager."""
    try:
        if ch.action == ChallengeAction.PRESENT:
            solver.present(ch)
        elif ch.action == ChallengeAction.CLEAN_UP:
            solver.cleanup(ch)
        else:
            return ChallengeResponse(
                uid=ch.uid,
                success=False,
                result=Status(
                    message=f"unknown challenge action {ch.action!r}",
                    reason="BadRequest",
                    code=400,
                ),
            )
    except WebhookError as e:
        logger.error(
            "Challenge action failed",
            extra={"challenge_uid": ch.uid, "action": ch.action, "error": str(e)},
        )
        return ChallengeResponse(uid=ch.uid, success=False, result=Status(message=str(e)))

    return ChallengeResponse(uid=ch.uid, success=True)


def create_app(solver: PorkbunSolver, group_name: str) -> FastAPI:
    """Create the webhook application.

    Args:
        solver: An initialized solver.
        group_name: API group the solver is served under.
    """
    app = FastAPI(title="cert-manager-webhook-porkbun", version=__version__)
    group_version = f"{group_name}/{API_VERSION}"
    base_path = f"/apis/{group_version}"

    @app.get("/healthz", response_class=PlainTextResponse)
    def healthz() -> str:
        return "ok"

    @app.get(base_path)
    def discovery() -> dict[str, Any]:
        return {
            "kind": "APIResourceList",
            "apiVersion": "v1",
            "groupVersion": group_version,
            "resources": [
                {
                    "name": solver.name(),
                    "singularName": solver.name(),
                    "namespaced": False,
                    "kind": "ChallengePayload",
                    "verbs": ["create"],
                }
            ],
        }

    # Sync handler; runs in FastAPI's threadpool.
    @app.post(base_path + "/{solver_name}")
    def solve(solver_name: str, payload: ChallengePayload) -> dict[str, Any]:
        if solver_name != solver.name():
            raise HTTPException(status_code=404, detail=f"unknown solver {solver_name!r}")
        if payload.request is None:
            raise HTTPException(status_code=400, detail="challenge payload has no request")

        response = handle_challenge(solver, payload.request)
        result = ChallengePayload(
            api_version=payload.api_version,
            request=payload.request,
            response=response,
        )
        return result.model_dump(by_alias=True, exclude_none=True)

    return app
