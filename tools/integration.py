import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
from jose import jwt
from loguru import logger

from tools.errors import IntegrationError

TOKEN_TTL = timedelta(hours=2)


class IntegrationAppClient:
    """Integration.app REST client scoped to one customer."""

    def __init__(
        self,
        customer_id: Optional[str],
        customer_name: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.customer_id = customer_id
        self.customer_name = customer_name or customer_id
        self.workspace_key = os.getenv("INTEGRATION_APP_WORKSPACE_KEY")
        self.workspace_secret = os.getenv("INTEGRATION_APP_WORKSPACE_SECRET")
        self.base_url = os.getenv("INTEGRATION_APP_API_URL", "https://api.integration.app")
        self.timeout = float(os.getenv("INTEGRATION_APP_TIMEOUT", "20"))
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _generate_token(self) -> str:
        """Sign a customer access token with the workspace secret."""
        if not self.workspace_key or not self.workspace_secret:
            raise IntegrationError("Integration.app workspace credentials are not configured")

        claims = {
            "id": self.customer_id,
            "name": self.customer_name,
            "iss": self.workspace_key,
            "exp": datetime.now(timezone.utc) + TOKEN_TTL,
        }
        return jwt.encode(claims, self.workspace_secret, algorithm="HS512")

    def _http(self) -> httpx.Client:
        # Token is only minted on the first real call
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self._generate_token()}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._http().request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise IntegrationError(
                f"Integration.app {method} {path} failed with {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise IntegrationError(f"Integration.app {method} {path} failed: {e}") from e
        except ValueError as e:
            raise IntegrationError(f"Integration.app {method} {path} returned invalid JSON") from e

    def list_connections(self) -> List[Dict[str, Any]]:
        """List the customer's connections, in platform order."""
        data = self._request("GET", "/connections")
        return data.get("items") or []

    def run_action(
        self,
        connection_id: str,
        action_key: str,
        cursor: Optional[str] = None,
        instance_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Run a list action on a connection and return one page.

        Args:
            connection_id: Connection to run the action on
            action_key: Action key, e.g. "get-equipment" or "get-objects"
            cursor: Continuation cursor from the previous page
            instance_key: Custom object instance key, for custom actions

        Returns:
            {"records": [...], "cursor": next cursor or None}
        """
        params = {"instanceKey": instance_key} if instance_key else None
        logger.debug(f"Running action {action_key} on {connection_id} with cursor {cursor}")

        data = self._request(
            "POST",
            f"/connections/{connection_id}/actions/{action_key}/run",
            params=params,
            json={"cursor": cursor},
        )

        output = data.get("output")
        if not isinstance(output, dict):
            raise IntegrationError(f"Action {action_key} returned no output")

        records = output.get("records") or []
        if not isinstance(records, list):
            raise IntegrationError(f"Action {action_key} returned malformed records")

        return {"records": records, "cursor": output.get("cursor") or None}

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None
