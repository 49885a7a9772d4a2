from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Runtime environment: "development" exposes error detail in responses
    ENVIRONMENT: str = "development"
    PORT: int = 3001

    LOGGER: int = 20
    LOG_DIR: str = "logs"

    # Google Maps Configuration
    GOOGLE_MAPS_API_KEY: str = ""      # Server-side key
    GOOGLE_MAPS_CLIENT_KEY: str = ""   # Client-side key
    PLACES_ENDPOINT: str = "https://maps.googleapis.com/maps/api/place/textsearch/json"
    DETAILS_ENDPOINT: str = "https://maps.googleapis.com/maps/api/place/details/json"
    DIRECTIONS_ENDPOINT: str = "https://maps.googleapis.com/maps/api/directions/json"
    DETAILS_FIELDS: str = "name,formatted_address,geometry,rating,opening_hours,photos,website"
    PROVIDER_TIMEOUT: float = 10.0
    MAX_RESULTS: int = 10
    MAP_EMBED_MODE: str = "embed"  # Options: embed, static

    # Open WebUI (intent classifier) Configuration
    OPEN_WEBUI_BASE_URL: str = "http://localhost:3000"
    OPEN_WEBUI_MODEL: str = "llama2"
    OPEN_WEBUI_API_KEY: str = ""
    LLM_TIMEOUT: float = 30.0
    LLM_PROBE_TIMEOUT: float = 5.0

    # Cache
    CACHE_TTL: int = 300  # seconds
    CACHE_MAX_ENTRIES: int = 1000

    # Security
    ALLOWED_ORIGINS: str = "http://localhost:3001,http://localhost:8080,http://127.0.0.1:3001"
    CLIENT_API_KEY: str = ""

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

settings = Settings()
