import asyncio
import logging
from urllib.parse import quote

from automate.providers.base import BaseProvider, ProviderError
from automate.schemas.safety import Complaint, Recall, SafetyData, SafetyRating
from automate.schemas.vehicle import VehicleSpecs

logger = logging.getLogger(__name__)

MAX_COMPLAINTS = 20


def _to_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _parse_specs(r: dict) -> VehicleSpecs:
    return VehicleSpecs(
        make=r.get("Make") or "",
        model=r.get("Model") or "",
        year=_to_int(r.get("ModelYear")),
        trim=r.get("Trim") or "",
        body_class=r.get("BodyClass") or "",
        drive_type=r.get("DriveType") or "",
        fuel_type=r.get("FuelTypePrimary") or "",
        engine_cylinders=r.get("EngineCylinders") or "",
        engine_hp=r.get("EngineHP") or "",
        engine_displacement=r.get("DisplacementL") or "",
        transmission_style=r.get("TransmissionStyle") or "",
        doors=r.get("Doors") or "",
        manufacturer_name=r.get("Manufacturer") or "",
        plant_city=r.get("PlantCity") or "",
        plant_country=r.get("PlantCountry") or "",
        vehicle_type=r.get("VehicleType") or "",
        gvwr=r.get("GVWR") or "",
    )


def _parse_rating(r: dict) -> SafetyRating:
    return SafetyRating(
        overall_rating=str(r.get("OverallRating") or "Not Rated"),
        frontal_crash_rating=str(r.get("OverallFrontCrashRating") or "Not Rated"),
        side_crash_rating=str(r.get("OverallSideCrashRating") or "Not Rated"),
        rollover_rating=str(r.get("RolloverRating") or "Not Rated"),
        complaints=_to_int(r.get("ComplaintsCount")),
        recalls=_to_int(r.get("RecallsCount")),
    )


def _parse_recall(r: dict) -> Recall:
    return Recall(
        campaign_number=r.get("NHTSACampaignNumber") or "",
        report_received_date=r.get("ReportReceivedDate") or "",
        component=r.get("Component") or "",
        summary=r.get("Summary") or "",
        consequence=r.get("Consequence") or "",
        remedy=r.get("Remedy") or "",
        manufacturer=r.get("Manufacturer") or "",
    )


def _parse_complaint(r: dict) -> Complaint:
    return Complaint(
        odi_number=str(r.get("odiNumber") or ""),
        date_of_incident=r.get("dateOfIncident") or "",
        component=r.get("components") or "",
        summary=r.get("summary") or "",
        crash=r.get("crash") in ("Y", True),
        fire=r.get("fire") in ("Y", True),
        number_of_injuries=_to_int(r.get("numberOfInjuries")),
        number_of_deaths=_to_int(r.get("numberOfDeaths")),
    )


class NHTSAProvider(BaseProvider):
    """Vehicle specs, crash ratings, recalls and complaints from NHTSA.

    The NHTSA APIs are free and need no key.
    """

    PROVIDER_NAME = "NHTSA"

    async def decode_vin(self, vin: str) -> VehicleSpecs | None:
        data = await self._get_json(
            f"{self.settings.NHTSA_VPIC_URL}/vehicles/DecodeVinValuesExtended/{quote(vin)}",
            params={"format": "json"},
        )
        with self._parsing("VIN decode"):
            results = data.get("Results") or []
            return _parse_specs(results[0]) if results else None

    async def get_all_makes(self) -> list[str]:
        data = await self._get_json(
            f"{self.settings.NHTSA_VPIC_URL}/vehicles/GetAllMakes",
            params={"format": "json"},
        )
        with self._parsing("makes"):
            return sorted(r["Make_Name"] for r in data.get("Results") or [] if r.get("Make_Name"))

    async def get_models_for_make(self, make: str) -> list[str]:
        data = await self._get_json(
            f"{self.settings.NHTSA_VPIC_URL}/vehicles/GetModelsForMake/{quote(make)}",
            params={"format": "json"},
        )
        with self._parsing("models"):
            return sorted(r["Model_Name"] for r in data.get("Results") or [] if r.get("Model_Name"))

    async def get_safety_ratings(self, make: str, model: str, year: int) -> SafetyRating | None:
        """Look up the NHTSA vehicle id for the make/model/year, then its ratings."""
        search = await self._get_json(
            f"{self.settings.NHTSA_SAFETY_URL}/modelyear/{year}/make/{quote(make)}/model/{quote(model)}",
            params={"format": "json"},
        )
        with self._parsing("safety rating search"):
            variants = search.get("Results") or []
            vehicle_id = variants[0].get("VehicleId") if variants else None
        if not vehicle_id:
            logger.info(f"[NHTSA] No safety ratings for {year} {make} {model}")
            return None

        ratings = await self._get_json(
            f"{self.settings.NHTSA_SAFETY_URL}/VehicleId/{vehicle_id}",
            params={"format": "json"},
        )
        with self._parsing("safety rating"):
            results = ratings.get("Results") or []
            return _parse_rating(results[0]) if results else None

    async def get_recalls(self, make: str, model: str, year: int) -> list[Recall]:
        data = await self._get_json(
            self.settings.NHTSA_RECALLS_URL,
            params={"make": make, "model": model, "modelYear": year},
        )
        with self._parsing("recalls"):
            return [_parse_recall(r) for r in data.get("results") or []]

    async def get_complaints(self, make: str, model: str, year: int) -> list[Complaint]:
        data = await self._get_json(
            self.settings.NHTSA_COMPLAINTS_URL,
            params={"make": make, "model": model, "modelYear": year},
        )
        with self._parsing("complaints"):
            results = (data.get("results") or [])[:MAX_COMPLAINTS]
            return [_parse_complaint(r) for r in results]

    async def get_vehicle_data(self, make: str, model: str, year: int) -> SafetyData:
        """Ratings, recalls and complaints fetched in parallel.

        A failing sub-request degrades to its empty form. Only when all three
        fail is the error raised to the caller.
        """
        results = await asyncio.gather(
            self.get_safety_ratings(make, model, year),
            self.get_recalls(make, model, year),
            self.get_complaints(make, model, year),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, Exception)]
        for e in errors:
            logger.warning(f"[NHTSA] Partial safety data for {year} {make} {model}: {e!r}")
        if len(errors) == len(results):
            if all(isinstance(e, ProviderError) for e in errors):
                raise errors[0]
            raise ProviderError(self.PROVIDER_NAME, f"all safety lookups failed: {errors[0]!r}") from errors[0]

        ratings, recalls, complaints = (
            None if isinstance(r, Exception) else r for r in results
        )
        recalls = recalls or []
        complaints = complaints or []
        return SafetyData(
            make=make,
            model=model,
            year=year,
            safety=ratings,
            recalls=recalls,
            complaints=complaints,
            recall_count=len(recalls),
            complaint_count=len(complaints),
        )
