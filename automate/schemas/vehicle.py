from pydantic import ConfigDict, Field

from automate.schemas.common import CamelModel


class VehicleIdentity(CamelModel):
    model_config = ConfigDict(frozen=True)

    make: str = Field(min_length=1)
    model: str = Field(min_length=1)
    year: int = Field(gt=0)

    def describe(self) -> str:
        return f"{self.year} {self.make} {self.model}"


class LocationFilter(CamelModel):
    postal_code: str | None = None
    radius_miles: int = Field(default=50, gt=0)


class VehicleRef(CamelModel):
    """A make/model pair with an optional year, as used by comparisons."""

    make: str
    model: str
    year: int | None = None

    def describe(self) -> str:
        if self.year:
            return f"{self.year} {self.make} {self.model}"
        return f"{self.make} {self.model}"


class VehicleSpecs(CamelModel):
    make: str = ""
    model: str = ""
    year: int = 0
    trim: str = ""
    body_class: str = ""
    drive_type: str = ""
    fuel_type: str = ""
    engine_cylinders: str = ""
    engine_hp: str = Field(default="", alias="engineHP")
    engine_displacement: str = ""
    transmission_style: str = ""
    doors: str = ""
    manufacturer_name: str = ""
    plant_city: str = ""
    plant_country: str = ""
    vehicle_type: str = ""
    gvwr: str = ""
