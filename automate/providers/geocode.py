import logging

from automate.providers.base import BaseProvider, ProviderError
from automate.schemas.geocode import GeocodeResult

logger = logging.getLogger(__name__)


def _component(components: list[dict], kind: str) -> dict:
    for c in components:
        if kind in (c.get("types") or []):
            return c
    return {}


class GeocodeProvider(BaseProvider):
    """Resolves free-text locations to a postal code via Google Geocoding."""

    PROVIDER_NAME = "Geocode"

    @property
    def configured(self) -> bool:
        return bool(self.settings.GOOGLE_PLACES_API_KEY)

    async def geocode(self, query: str) -> GeocodeResult | None:
        if not self.configured:
            raise ProviderError(self.PROVIDER_NAME, "GOOGLE_PLACES_API_KEY is not configured")

        data = await self._get_json(
            self.settings.GOOGLE_GEOCODE_URL,
            params={"address": query, "key": self.settings.GOOGLE_PLACES_API_KEY},
        )
        with self._parsing("geocode"):
            results = data.get("results") or []
            if not results:
                logger.info(f"[Geocode] No results for {query!r}")
                return None
            return self._parse_result(results[0])

    @staticmethod
    def _parse_result(first: dict) -> GeocodeResult:
        components = first.get("address_components") or []
        state = _component(components, "administrative_area_level_1")
        location = (first.get("geometry") or {}).get("location") or {}

        return GeocodeResult(
            postal_code=_component(components, "postal_code").get("long_name", ""),
            city=(
                _component(components, "locality").get("long_name")
                or _component(components, "sublocality").get("long_name")
                or ""
            ),
            state=state.get("short_name") or state.get("long_name") or "",
            lat=location.get("lat"),
            lng=location.get("lng"),
            formatted_address=first.get("formatted_address") or "",
        )
