"""
Analytics backend client.

Async httpx client for the endpoints the analytics core consumes:
- Article detail (product card plus daily metric records)
- Advertising campaign detail (campaign plus its articles)
- Bulk article fetches routed through the bounded-concurrency request queue
"""

import asyncio
from functools import partial
from typing import Any, Optional, Sequence, Union

import httpx
from pydantic import ValidationError

from seller_analytics.config import get_settings
from seller_analytics.engine.request_queue import RequestQueue, get_analytics_request_queue
from seller_analytics.models.metrics import DailyMetricRecord
from seller_analytics.models.periods import Period
from seller_analytics.models.responses import ArticleResponse, CampaignDetail
from seller_analytics.utils.logging import get_logger

logger = get_logger(__name__)


class AnalyticsAPIError(Exception):
    """Raised when an analytics backend request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AnalyticsClient:
    """
    Client for the seller analytics backend.

    Attributes:
        base_url: Backend base URL, e.g. "http://localhost:8080/api"
        token: Bearer token; empty string sends no Authorization header
        timeout: Request timeout in seconds
        queue: Request queue for bulk fetches (default: shared analytics queue)

    Example:
        >>> async with AnalyticsClient() as client:
        ...     campaign = await client.get_campaign_detail(42, cabinet_id=7)
        ...     articles = await client.fetch_articles(campaign.nm_ids, cabinet_id=7)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        queue: Optional[RequestQueue] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = settings.api_token if token is None else token
        self.timeout = timeout or settings.api_timeout_seconds
        self.queue = queue
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            headers = {"Content-Type": "application/json", "Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http_client

    @staticmethod
    def _scope_params(seller_id: Optional[int], cabinet_id: Optional[int]) -> dict[str, int]:
        params = {}
        if seller_id is not None:
            params["sellerId"] = seller_id
        if cabinet_id is not None:
            params["cabinetId"] = cabinet_id
        return params

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            AnalyticsAPIError: On HTTP error status or transport failure
        """
        client = self._ensure_client()
        try:
            response = await client.request(method, path, json=json, params=params or None)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "analytics_api_request_failed",
                method=method,
                path=path,
                status_code=e.response.status_code,
            )
            raise AnalyticsAPIError(
                f"{method} {path} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("analytics_api_request_error", method=method, path=path, error=str(e))
            raise AnalyticsAPIError(f"{method} {path} failed: {e}") from e

        logger.debug("analytics_api_request_completed", method=method, path=path)
        return response.json()

    async def get_article(
        self,
        nm_id: int,
        periods: Sequence[Period] = (),
        seller_id: Optional[int] = None,
        cabinet_id: Optional[int] = None,
    ) -> ArticleResponse:
        """
        Fetch detail data for one article.

        Args:
            nm_id: Marketplace article number
            periods: Comparison periods to evaluate server-side (may be empty)
            seller_id: Seller scope for manager/admin users
            cabinet_id: Seller cabinet to read from

        Returns:
            ArticleResponse with the article's daily metric records

        Raises:
            AnalyticsAPIError: On request failure or a malformed payload
        """
        body: dict[str, Any] = {
            "periods": [period.model_dump(mode="json", by_alias=True) for period in periods],
            **self._scope_params(seller_id, cabinet_id),
        }
        data = await self._request("POST", f"/analytics/article/{nm_id}", json=body)
        try:
            return ArticleResponse.model_validate(data)
        except ValidationError as e:
            logger.error("article_payload_invalid", nm_id=nm_id, errors=e.error_count())
            raise AnalyticsAPIError(f"Malformed article payload for {nm_id}") from e

    async def get_campaign_detail(
        self,
        campaign_id: int,
        seller_id: Optional[int] = None,
        cabinet_id: Optional[int] = None,
    ) -> CampaignDetail:
        """
        Fetch an advertising campaign with the articles it promotes.

        Raises:
            AnalyticsAPIError: On request failure or a malformed payload
        """
        data = await self._request(
            "GET",
            f"/advertising/campaigns/{campaign_id}",
            params=self._scope_params(seller_id, cabinet_id),
        )
        try:
            return CampaignDetail.model_validate(data)
        except ValidationError as e:
            logger.error("campaign_payload_invalid", campaign_id=campaign_id, errors=e.error_count())
            raise AnalyticsAPIError(f"Malformed campaign payload for {campaign_id}") from e

    async def fetch_articles(
        self,
        nm_ids: Sequence[int],
        periods: Sequence[Period] = (),
        seller_id: Optional[int] = None,
        cabinet_id: Optional[int] = None,
    ) -> dict[int, Union[ArticleResponse, AnalyticsAPIError]]:
        """
        Fetch several articles through the request queue.

        Requests start in the order of ``nm_ids`` (duplicates collapsed) and
        respect the queue's concurrency cap. A failed article is reported in
        place of its response; it does not abort the others.

        Returns:
            Article number to ArticleResponse or the AnalyticsAPIError it raised
        """
        queue = self.queue or get_analytics_request_queue()
        unique_ids = list(dict.fromkeys(nm_ids))
        futures = [
            queue.add(partial(self.get_article, nm_id, periods, seller_id, cabinet_id))
            for nm_id in unique_ids
        ]
        outcomes = await asyncio.gather(*futures, return_exceptions=True)

        results: dict[int, Union[ArticleResponse, AnalyticsAPIError]] = {}
        for nm_id, outcome in zip(unique_ids, outcomes):
            if isinstance(outcome, AnalyticsAPIError):
                logger.warning(
                    "article_fetch_failed",
                    nm_id=nm_id,
                    status_code=outcome.status_code,
                    error=str(outcome),
                )
            elif isinstance(outcome, BaseException):
                raise outcome
            results[nm_id] = outcome

        logger.info(
            "articles_fetched",
            requested=len(unique_ids),
            failed=sum(1 for r in results.values() if isinstance(r, AnalyticsAPIError)),
        )
        return results

    async def fetch_daily_data(
        self,
        nm_ids: Sequence[int],
        seller_id: Optional[int] = None,
        cabinet_id: Optional[int] = None,
    ) -> dict[int, list[DailyMetricRecord]]:
        """
        Daily records per article, skipping articles whose fetch failed.

        The result feeds ``aggregate_entities`` directly.
        """
        results = await self.fetch_articles(nm_ids, seller_id=seller_id, cabinet_id=cabinet_id)
        return {
            nm_id: result.daily_data
            for nm_id, result in results.items()
            if isinstance(result, ArticleResponse)
        }
