from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Storage mode: "mongodb" or "local"
    STORAGE_MODE: str = "local"

    # MongoDB Configuration (only needed if STORAGE_MODE=mongodb)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "pulpuluck_db"

    LOGGER: int = 20
    LOG_DIR: str = "logs"

    # Local storage
    DATA_DIR: str = "data"
    FEEDBACK_FILE: str = "fountain-feedback.json"

    # Overpass (fountain data)
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    OVERPASS_TIMEOUT_SECONDS: float = 30.0
    OVERPASS_QUERY_TIMEOUT: int = 25
    FOUNTAIN_CACHE_KEY: str = "fountains_yerevan"
    FOUNTAIN_FETCH_RETRIES: int = 2
    FOUNTAIN_RETRY_DELAY_SECONDS: float = 1.0

    # Yerevan bounding box
    BBOX_MIN_LAT: float = 40.1
    BBOX_MIN_LON: float = 44.4
    BBOX_MAX_LAT: float = 40.3
    BBOX_MAX_LON: float = 44.7

    # OSRM (walking directions)
    OSRM_URL: str = "https://router.project-osrm.org"
    ROUTE_TIMEOUT_SECONDS: float = 8.0
    WALKING_SPEED_MPS: float = 1.4

    LOCATION_TIMEOUT_SECONDS: float = 10.0

    # Feedback API, as seen from the frontend
    BACKEND_URL: str = "http://localhost:8000"

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
