import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class ClientSettings:
    api_base_url: str = "http://localhost:8000"
    cache_dir: str = ""
    http_timeout: float = 15.0
    r2_public_base_url: str = ""
    # Relative paths resolve against api_base_url.
    presign_url: str = "/api/r2/presign"

    @staticmethod
    def from_env() -> "ClientSettings":
        load_dotenv()
        return ClientSettings(
            api_base_url=os.getenv(
                "SIGNOFF_API_BASE_URL", "http://localhost:8000"
            ).rstrip("/"),
            cache_dir=os.getenv("SIGNOFF_CACHE_DIR", ""),
            http_timeout=float(os.getenv("SIGNOFF_HTTP_TIMEOUT", "15")),
            r2_public_base_url=os.getenv("R2_PUBLIC_BASE_URL", ""),
            presign_url=os.getenv("SIGNOFF_PRESIGN_URL", "/api/r2/presign"),
        )
