from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from culturia_sync.sync.models import Category, normalize_country

SCOPES = ("all", "country", "category")


class SyncValidationError(ValueError):
    """Malformed sync request. Raised before any remote call is made."""


@dataclass(frozen=True)
class SyncRequest:
    scope: str
    country: Optional[str] = None
    category: Optional[Category] = None

    @classmethod
    def build(
        cls,
        scope: Any,
        country: Any = None,
        category: Any = None,
    ) -> "SyncRequest":
        scope_norm = str(scope or "").strip().lower()
        if scope_norm not in SCOPES:
            raise SyncValidationError(
                f"Invalid sync type: {scope!r}. Expected one of: {', '.join(SCOPES)}"
            )

        country_norm: Optional[str] = None
        category_norm: Optional[Category] = None

        if scope_norm in ("country", "category"):
            if country is None or not str(country).strip():
                raise SyncValidationError(
                    "Country code and category are required"
                    if scope_norm == "category"
                    else "Country code is required"
                )
            try:
                country_norm = normalize_country(country)
            except ValueError as e:
                raise SyncValidationError(str(e)) from e

        if scope_norm == "category":
            if category is None or not str(category).strip():
                raise SyncValidationError("Country code and category are required")
            try:
                category_norm = Category.parse(category)
            except ValueError as e:
                raise SyncValidationError(str(e)) from e

        return cls(scope=scope_norm, country=country_norm, category=category_norm)

    @classmethod
    def from_payload(cls, payload: Any) -> "SyncRequest":
        """
        Accepts the admin panel's body shape ({type, country_code, category})
        as well as {scope, country, category}.
        """
        if not isinstance(payload, Mapping):
            raise SyncValidationError("Request body must be a JSON object")

        scope = payload.get("scope", payload.get("type"))
        country = payload.get("country", payload.get("country_code"))
        return cls.build(scope, country, payload.get("category"))

    def describe(self) -> str:
        if self.scope == "all":
            return "all"
        if self.scope == "country":
            return f"country {self.country}"
        return f"category {self.country}-{self.category.value}"
