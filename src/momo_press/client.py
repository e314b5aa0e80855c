"""Client for the MoMo Press backend API."""

from typing import Any

import requests


class MoMoPressClient:
    """Client for requesting normalized transactions from the backend."""

    DEFAULT_BASE_URL = "http://localhost:3000"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0) -> None:
        """Initialize client with the backend base URL."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an API request."""
        url = f"{self.base_url}/{endpoint}"
        response = self._session.request(method, url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()  # type: ignore[no-any-return]

    def health(self) -> bool:
        """Return True if the backend answers its health check."""
        try:
            return self._request("GET", "healthz").get("status") == "healthy"
        except requests.RequestException:
            return False

    def update_transactions(self, year: int, month: int) -> list[dict[str, Any]]:
        """Regenerate and fetch normalized transactions for one month.

        Args:
            year: Year to filter on
            month: Month to filter on (1-12)

        Returns:
            List of normalized transaction dicts

        Raises:
            requests.HTTPError: If the backend rejects the period or fails
        """
        result = self._request(
            "GET",
            "api/updateTransactions",
            params={"year": year, "month": month},
        )
        return result.get("transactions", [])  # type: ignore[no-any-return]
