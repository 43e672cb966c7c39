"""
Ehub API Client
Single point of outbound HTTP traffic to the Ehub backend. Owns the bearer
token lifecycle and the retry policy; never raises across its public methods.
"""
import asyncio
import json
import re
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ..config import settings
from ..schemas.api import (
    ApiResponse,
    AssignmentResponseRequest,
    BroadcastRequest,
    LoginRequest,
    SignupRequest,
)
from ..storage.local_provider import LocalTokenStorage
from ..storage.provider import AUTH_TOKEN_KEY, TokenStorage

logger = structlog.get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again shortly."
RETRY_AFTER_MIN_S = 1
RETRY_AFTER_MAX_S = 30
RATE_LIMIT_BACKOFF_CAP_S = 8
NETWORK_BACKOFF_CAP_S = 4

# Leading integer, as parseInt would read it ("2", "2.5" -> 2; HTTP dates -> no match)
_RETRY_AFTER_INT = re.compile(r"^\s*([+-]?\d+)")

Body = Union[Dict[str, Any], BaseModel, None]


def backoff_delay(retry_count: int, cap_s: float) -> float:
    """Exponential delay in seconds: 1, 2, 4, ... capped at cap_s."""
    return min(float(2 ** retry_count), float(cap_s))


def retry_after_delay(header: Optional[str], retry_count: int) -> float:
    """Delay for a 429: the server's Retry-After hint clamped to [1, 30], else backoff."""
    match = _RETRY_AFTER_INT.match(header) if header else None
    if match:
        seconds = int(match.group(1))
        return float(min(max(seconds, RETRY_AFTER_MIN_S), RETRY_AFTER_MAX_S))
    return backoff_delay(retry_count, RATE_LIMIT_BACKOFF_CAP_S)


def _serialize(body: Body) -> Optional[str]:
    if body is None:
        return None
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(body, default=str)


class EhubApiClient:
    """Client for the Ehub REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_storage: Optional[TokenStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        timeout: Optional[float] = None,
        rate_limit_max_retries: Optional[int] = None,
        network_max_retries: Optional[int] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.storage = token_storage if token_storage is not None else LocalTokenStorage()
        self._transport = transport
        self._sleep = sleep or asyncio.sleep
        self.timeout = timeout if timeout is not None else settings.api_timeout_s
        self.rate_limit_max_retries = (
            rate_limit_max_retries if rate_limit_max_retries is not None else settings.rate_limit_max_retries
        )
        self.network_max_retries = (
            network_max_retries if network_max_retries is not None else settings.network_max_retries
        )
        self._token: Optional[str] = self.storage.get(AUTH_TOKEN_KEY)

    @property
    def token(self) -> Optional[str]:
        return self._token

    def _build_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(extra or {})
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Body = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResponse:
        """
        Send a request and fold every outcome into an ApiResponse.

        Args:
            endpoint: Path below the base URL, e.g. "/projects"
            method: HTTP method
            body: JSON body (dict or pydantic model)
            headers: Extra headers; Content-Type and Authorization are always set

        Returns:
            ApiResponse with data on success, error otherwise
        """
        url = f"{self.base_url}{endpoint}"
        content = _serialize(body)
        # Shared by the rate-limit and network retry paths
        retry_count = 0

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            while True:
                try:
                    response = await client.request(
                        method,
                        url,
                        content=content,
                        headers=self._build_headers(headers),
                    )
                except httpx.RequestError as e:
                    if retry_count < self.network_max_retries:
                        delay = backoff_delay(retry_count, NETWORK_BACKOFF_CAP_S)
                        logger.warning(
                            "api_retry_scheduled",
                            reason="network",
                            endpoint=endpoint,
                            retry=retry_count + 1,
                            delay_s=delay,
                            error=str(e),
                        )
                        await self._sleep(delay)
                        retry_count += 1
                        continue
                    logger.error("api_request_failed", endpoint=endpoint, method=method, error=str(e))
                    return ApiResponse(error=str(e) or "Unknown error")
                except (httpx.InvalidURL, ValueError) as e:
                    # Request could not be built (bad URL, non-ASCII header); retrying cannot help
                    logger.error("api_request_invalid", endpoint=endpoint, method=method, error=str(e))
                    return ApiResponse(error=str(e) or "Unknown error")

                if response.status_code == 429:
                    if retry_count < self.rate_limit_max_retries:
                        delay = retry_after_delay(response.headers.get("Retry-After"), retry_count)
                        logger.warning(
                            "api_retry_scheduled",
                            reason="rate_limited",
                            endpoint=endpoint,
                            retry=retry_count + 1,
                            delay_s=delay,
                        )
                        await self._sleep(delay)
                        retry_count += 1
                        continue
                    logger.error("api_rate_limited", endpoint=endpoint, method=method, retries=retry_count)
                    return ApiResponse(error=RATE_LIMIT_MESSAGE)

                if not response.is_success:
                    try:
                        error_data = response.json()
                    except ValueError:
                        error_data = {}
                    message = error_data.get("error") if isinstance(error_data, dict) else None
                    error = message if isinstance(message, str) and message else f"HTTP {response.status_code}"
                    logger.error(
                        "api_request_failed",
                        endpoint=endpoint,
                        method=method,
                        status=response.status_code,
                        error=error,
                    )
                    return ApiResponse(error=error)

                if not response.content.strip():
                    return ApiResponse(data=None)
                try:
                    return ApiResponse(data=response.json())
                except ValueError:
                    logger.error("api_invalid_json", endpoint=endpoint, status=response.status_code)
                    return ApiResponse(error="Invalid JSON response")

    def _remember_token(self, result: ApiResponse) -> None:
        if isinstance(result.data, dict):
            token = result.data.get("token")
            if isinstance(token, str) and token:
                self.set_token(token)

    # Authentication

    async def login(self, identifier: str, password: str) -> ApiResponse:
        result = await self.request(
            "/auth/login",
            method="POST",
            body=LoginRequest(identifier=identifier, password=password),
        )
        self._remember_token(result)
        return result

    async def signup(
        self,
        email: str,
        password: str,
        name: str,
        school: Optional[str] = None,
        phone: Optional[str] = None,
        gcash_number: Optional[str] = None,
    ) -> ApiResponse:
        try:
            payload = SignupRequest(
                email=email,
                password=password,
                name=name,
                school=school,
                phone=phone,
                gcash_number=gcash_number,
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            logger.warning("signup_rejected", field=field, error=first.get("msg"))
            return ApiResponse(error=f"Invalid {field}: {first.get('msg')}" if field else first.get("msg"))
        result = await self.request("/auth/signup", method="POST", body=payload)
        self._remember_token(result)
        return result

    def logout(self) -> None:
        """Forget the token locally; the server is not contacted."""
        self._token = None
        self.storage.remove(AUTH_TOKEN_KEY)

    def set_token(self, token: str) -> None:
        self._token = token
        self.storage.set(AUTH_TOKEN_KEY, token)

    # Projects

    async def get_projects(self) -> ApiResponse:
        return await self.request("/projects")

    async def get_project(self, project_id: str) -> ApiResponse:
        return await self.request(f"/projects/{project_id}")

    async def create_project(self, project_data: Body) -> ApiResponse:
        return await self.request("/projects", method="POST", body=project_data)

    async def update_project(self, project_id: str, updates: Body) -> ApiResponse:
        return await self.request(f"/projects/{project_id}", method="PUT", body=updates)

    async def delete_project(self, project_id: str) -> ApiResponse:
        return await self.request(f"/projects/{project_id}", method="DELETE")

    async def broadcast_to_fabricators(self, project_id: str, message: Optional[str] = None) -> ApiResponse:
        body = BroadcastRequest.model_construct(project_id=project_id, message=message)
        return await self.request("/projects/broadcast-fabricators", method="POST", body=body)

    async def respond_to_assignment(
        self,
        project_id: str,
        response: str,  # accepted|declined
        assignment_id: Optional[str] = None,
    ) -> ApiResponse:
        body = AssignmentResponseRequest.model_construct(
            project_id=project_id,
            response=response,
            assignment_id=assignment_id,
        )
        return await self.request("/projects/respond-assignment", method="POST", body=body)

    # Tasks

    async def get_tasks(self) -> ApiResponse:
        return await self.request("/tasks")

    async def get_task(self, task_id: str) -> ApiResponse:
        return await self.request(f"/tasks/{task_id}")

    async def create_task(self, task_data: Body) -> ApiResponse:
        return await self.request("/tasks", method="POST", body=task_data)

    async def update_task(self, task_id: str, updates: Body) -> ApiResponse:
        return await self.request(f"/tasks/{task_id}", method="PUT", body=updates)

    async def delete_task(self, task_id: str) -> ApiResponse:
        return await self.request(f"/tasks/{task_id}", method="DELETE")

    # Work logs

    async def get_work_logs(self) -> ApiResponse:
        return await self.request("/worklogs")

    async def create_work_log(self, work_log_data: Body) -> ApiResponse:
        return await self.request("/worklogs", method="POST", body=work_log_data)

    # Materials

    async def get_materials(self) -> ApiResponse:
        return await self.request("/materials")

    async def create_material(self, material_data: Body) -> ApiResponse:
        return await self.request("/materials", method="POST", body=material_data)

    # Users

    async def get_users(self) -> ApiResponse:
        return await self.request("/users")

    async def create_client(self, client_data: Body) -> ApiResponse:
        return await self.request("/users/client", method="POST", body=client_data)

    async def health_check(self) -> ApiResponse:
        return await self.request("/health")
