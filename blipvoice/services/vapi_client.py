import logging
from typing import Any, Dict, Optional

import httpx

from blipvoice.core.errors import UpstreamError

logger = logging.getLogger(__name__)


def _response_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class VapiClient:
    def __init__(
        self,
        api_key: str,
        assistant_id: str,
        phone_number_id: str,
        base_url: str = "https://api.vapi.ai",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.assistant_id = assistant_id
        self.phone_number_id = phone_number_id
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    def build_call_payload(self, destination_number: str) -> Dict[str, Any]:
        return {
            "assistantId": self.assistant_id,
            "phoneNumberId": self.phone_number_id,
            "customer": {"number": destination_number},
        }

    async def create_call(self, destination_number: str) -> Dict[str, Any]:
        try:
            response = await self._client.post("/call", json=self.build_call_payload(destination_number))
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"Call provider unreachable: {type(exc).__name__}",
                payload={"message": str(exc) or type(exc).__name__},
            ) from exc
        payload = _response_payload(response)
        if response.is_error:
            raise UpstreamError(
                f"Call provider rejected the request ({response.status_code})",
                payload=payload,
                status_code=response.status_code,
            )
        if not isinstance(payload, dict) or not payload.get("id"):
            raise UpstreamError(
                "Call provider response has no call id",
                payload=payload,
                status_code=response.status_code,
            )
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()
