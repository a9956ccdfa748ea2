from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = "Ridebook Booking & Trip API"
    BOOKING_API_BASE_URL: str = "https://zipdrive.in/api"
    GUEST_BOOKINGS_PATH: str = "/bookings/guest/bookings"
    HOST_BOOKINGS_PATH: str = "/bookings/host/bookings"
    BOOKING_API_TIMEOUT_SECONDS: float = 30.0
    OSRM_BASE_URL: str = "https://router.project-osrm.org"
    ROUTING_PROFILE: str = "driving"
    ROUTING_TIMEOUT_SECONDS: float = 10.0
    GST_RATE: float = 0.18
    INSURANCE_PER_KM: float = 1.5
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"

settings = Settings()
