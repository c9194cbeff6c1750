import os
from dotenv import load_dotenv

# Load Environment Variables from project root .env
env_path = os.path.join(os.path.dirname(__file__), "../.env")
load_dotenv(env_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(name: str):
    value = os.getenv(name, "").strip()
    return int(value) if value else None


class Settings:
    # ═══════════════════════════════════════════════════════════════════
    # CHAINCAPS CONFIGURATION
    # ═══════════════════════════════════════════════════════════════════

    # --- Console ---
    SILENT_MODE = _env_flag("CHAINCAPS_SILENT", "true")  # Console logging off; file log only

    # --- Paths ---
    PACKAGE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../chaincaps"))
    CHAIN_REGISTRY_PATH = os.getenv(
        "CHAINCAPS_REGISTRY", os.path.join(PACKAGE_DIR, "data", "chains.json")
    )
    LOG_DIR = os.getenv(
        "CHAINCAPS_LOG_DIR", os.path.abspath(os.path.join(os.path.dirname(__file__), "../logs"))
    )
    LOG_TO_FILE = _env_flag("CHAINCAPS_LOG_TO_FILE", "true")

    # ═══════════════════════════════════════════════════════════════════
    # PROBING
    # ═══════════════════════════════════════════════════════════════════
    RPC_TIMEOUT_MS = int(os.getenv("CHAINCAPS_RPC_TIMEOUT_MS", "2000"))  # Per request, both checks
    INCLUDE_TESTNETS = _env_flag("CHAINCAPS_INCLUDE_TESTNETS", "false")

    # None = launch every (chain, capability) probe at once
    MAX_CONCURRENT_PROBES = _env_optional_int("CHAINCAPS_MAX_CONCURRENT_PROBES")

    # Live table refresh rate (frames per second)
    LIVE_REFRESH_PER_SECOND = 8
