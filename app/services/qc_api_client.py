"""
QC API Client

HTTP implementation of the job-details, draft and submission
collaborators against the external QC API.

Endpoints (relative to QC_API_BASE_URL):
- GET  /inspection/queue
- GET  /inspection/{id}
- PUT  /inspection/{id}/draft
- POST /inspection/{id}/submit
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.core.exceptions import JobNotFoundError, TransportError, SubmissionValidationError
from app.schemas.inspection import (
    JobDetails, PendingJob, DraftPayload, DraftAck, SubmissionPayload, SubmissionAck
)

logger = logging.getLogger(__name__)


class QCApiClient:
    """Async client for the external QC API."""

    QUEUE_PATH = "/inspection/queue"
    JOB_PATH = "/inspection/{job_id}"
    DRAFT_PATH = "/inspection/{job_id}/draft"
    SUBMIT_PATH = "/inspection/{job_id}/submit"

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.QC_API_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.QC_API_TOKEN
        self.timeout = timeout or settings.QC_API_TIMEOUT
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, path, json=json)
        except httpx.TimeoutException:
            logger.error(f"QC API timeout: {method} {path}")
            raise TransportError(f"QC API request timed out: {method} {path}")
        except httpx.HTTPError as e:
            logger.error(f"QC API error: {method} {path}: {e}")
            raise TransportError(f"QC API request failed: {e}")

    @staticmethod
    def _json_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {}

    def _error_message(self, response: httpx.Response) -> str:
        body = self._json_body(response)
        if isinstance(body, dict):
            return body.get("message") or body.get("detail") or f"HTTP error {response.status_code}"
        return f"HTTP error {response.status_code}"

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        message = self._error_message(response)
        logger.error(f"QC API error: HTTP {response.status_code} - {message}")
        raise TransportError(message, status_code=response.status_code)

    # ========================================================================
    # QUEUE
    # ========================================================================

    async def list_jobs(self) -> List[PendingJob]:
        response = await self._request("GET", self.QUEUE_PATH)
        self._raise_for_status(response)
        return [PendingJob.model_validate(item) for item in response.json()]

    # ========================================================================
    # COLLABORATORS
    # ========================================================================

    async def get_job_details(self, job_id: str) -> JobDetails:
        response = await self._request("GET", self.JOB_PATH.format(job_id=job_id))
        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        self._raise_for_status(response)
        return JobDetails.model_validate(response.json())

    async def save_draft(self, job_id: str, payload: DraftPayload) -> DraftAck:
        response = await self._request(
            "PUT",
            self.DRAFT_PATH.format(job_id=job_id),
            json=payload.model_dump(mode="json"),
        )
        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        self._raise_for_status(response)
        return DraftAck.model_validate({"job_id": job_id, **response.json()})

    async def submit_inspection(self, job_id: str, payload: SubmissionPayload) -> SubmissionAck:
        response = await self._request(
            "POST",
            self.SUBMIT_PATH.format(job_id=job_id),
            json=payload.model_dump(mode="json"),
        )
        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        if response.status_code in (400, 422):
            body = self._json_body(response)
            errors = body.get("errors") if isinstance(body, dict) else None
            raise SubmissionValidationError(self._error_message(response), errors=errors)
        self._raise_for_status(response)
        return SubmissionAck.model_validate({"job_id": job_id, **response.json()})
