from automate.schemas.common import CamelModel


class GeocodeResult(CamelModel):
    postal_code: str = ""
    city: str = ""
    state: str = ""
    lat: float | None = None
    lng: float | None = None
    formatted_address: str = ""
