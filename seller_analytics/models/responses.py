"""
Backend response shapes consumed by the analytics core.

Only the fields the core reads are modelled; anything else the backend
sends is ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .metrics import DailyMetricRecord
from .periods import Period


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ArticleSummary(_WireModel):
    """A product (article) as listed in a cabinet or campaign."""

    nm_id: int = Field(description="Marketplace article number")
    title: str = ""
    brand: str = ""
    subject_name: str = ""
    photo_tm: Optional[str] = None
    vendor_code: Optional[str] = None


class ArticleDetail(ArticleSummary):
    """Product card details returned with an article response."""

    rating: Optional[float] = None
    reviews_count: Optional[int] = None
    product_url: Optional[str] = None


class ArticleResponse(_WireModel):
    """
    Detail payload for one article.

    Attributes:
        article: Product card details
        periods: Periods the backend evaluated the request against
        daily_data: Daily metric records, one per reported date
    """

    article: ArticleDetail
    periods: list[Period] = Field(default_factory=list)
    daily_data: list[DailyMetricRecord] = Field(default_factory=list)


class CampaignDetail(_WireModel):
    """An advertising campaign and the articles it promotes."""

    id: int
    name: str = ""
    type: Optional[str] = None
    status: Optional[int] = None
    status_name: Optional[str] = None
    articles: list[ArticleSummary] = Field(default_factory=list)

    @property
    def nm_ids(self) -> list[int]:
        return [article.nm_id for article in self.articles]
