# ingesta/config.py
#
# Pipeline configuration loaded from environment variables.
#
# Design decisions:
#   - Frozen dataclass (not pydantic) because the pipeline is a standalone
#     offline process; pydantic is reserved for the API layer.
#   - ADMIN_API_URL has no default: there is no sensible public fallback for
#     the administrative console, and an empty URL would make httpx resolve
#     relative paths against nothing.
#   - ADMIN_API_TOKEN is optional. When present it is sent as a Bearer token,
#     the same scheme the console frontend uses.
#   - Paths default to ingesta/data relative to this file's directory so the
#     pipeline works out of the box after a fresh checkout.
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_INGESTA_DIR = Path(__file__).parent


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable pipeline configuration.

    Invariants:
      - admin_api_url is always non-empty (enforced by load_config).
      - download_timeout and page_size are positive integers.
    """

    data_dir: Path
    admin_api_url: str
    duckdb_output_path: Path
    admin_api_token: str | None = None
    download_timeout: int = 60
    page_size: int = 1000

    @property
    def raw_dir(self) -> Path:
        """Directory for downloaded raw JSON files."""
        return self.data_dir / "raw"

    @property
    def staging_dir(self) -> Path:
        """Directory for cleaned Parquet staging files."""
        return self.data_dir / "staging"


def load_config() -> PipelineConfig:
    """Build PipelineConfig from environment variables.

    Raises:
        ValueError: if ADMIN_API_URL is not set, or a numeric variable is not
            a positive integer.
    """
    admin_api_url = os.environ.get("ADMIN_API_URL", "").strip()
    if not admin_api_url:
        raise ValueError(
            "ADMIN_API_URL environment variable is required. "
            "Set it to the administrative console API base URL. "
            "See .env.example for instructions."
        )

    data_dir = Path(os.environ.get("PIPELINE_DATA_DIR", str(_INGESTA_DIR / "data")))
    duckdb_output_path = Path(
        os.environ.get("DUCKDB_OUTPUT_PATH", str(data_dir / "output" / "organigrama.duckdb"))
    )

    download_timeout = int(os.environ.get("PIPELINE_DOWNLOAD_TIMEOUT", "60"))
    page_size = int(os.environ.get("PIPELINE_PAGE_SIZE", "1000"))
    if download_timeout <= 0 or page_size <= 0:
        raise ValueError("PIPELINE_DOWNLOAD_TIMEOUT and PIPELINE_PAGE_SIZE must be positive")

    return PipelineConfig(
        data_dir=data_dir,
        admin_api_url=admin_api_url.rstrip("/"),
        duckdb_output_path=duckdb_output_path,
        admin_api_token=os.environ.get("ADMIN_API_TOKEN") or None,
        download_timeout=download_timeout,
        page_size=page_size,
    )
