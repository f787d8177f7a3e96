from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DEBUG: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # NHTSA endpoints need no key
    NHTSA_VPIC_URL: str = "https://vpic.nhtsa.dot.gov/api"
    NHTSA_SAFETY_URL: str = "https://api.nhtsa.gov/SafetyRatings"
    NHTSA_RECALLS_URL: str = "https://api.nhtsa.gov/recalls/recallsByVehicle"
    NHTSA_COMPLAINTS_URL: str = "https://api.nhtsa.gov/complaints/complaintsByVehicle"

    MARKETCHECK_API_KEY: str = ""
    MARKETCHECK_BASE_URL: str = "https://mc-api.marketcheck.com/v2"

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TIMEOUT_SECONDS: float = 30.0

    GOOGLE_PLACES_API_KEY: str = ""
    GOOGLE_GEOCODE_URL: str = "https://maps.googleapis.com/maps/api/geocode/json"

    YOUTUBE_API_KEY: str = ""
    YOUTUBE_API_URL: str = "https://www.googleapis.com/youtube/v3"

    PROVIDER_TIMEOUT_SECONDS: float = 10.0

    # Car profile listings search
    PROFILE_SAMPLE_ROWS: int = 10
    DEFAULT_RADIUS_MILES: int = 50
    LISTINGS_RADIUS_STEPS: list[int] = [50, 100, 200]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
