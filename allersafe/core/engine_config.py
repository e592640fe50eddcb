import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

from allersafe.core.logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

DEFAULT_HF_API_URL = "https://api-inference.huggingface.co/models/microsoft/DialoGPT-medium"


@dataclass(frozen=True)
class EngineConfig:
    enrichment_enabled: bool = True
    enrichment_timeout_seconds: float = 8.0
    enrichment_providers: Tuple[str, ...] = ("openai", "huggingface")
    openai_model: str = "gpt-4o-mini"
    hf_api_url: str = DEFAULT_HF_API_URL
    product_lookup_timeout_seconds: float = 5.0
    product_cache_ttl_seconds: int = 300
    patients_file: str = "data/patients.json"


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return default


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def _as_names(value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        return default
    names = tuple(item.strip().lower() for item in items if item.strip())
    return names


def _config_path() -> Path:
    return Path(__file__).resolve().parents[2] / "config" / "engine_config.json"


def _read_file(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        logger.warning(f"Invalid engine config JSON at {path}: {exc}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Engine config at {path} is not a JSON object; using defaults")
        return {}
    return data


def _apply(config: EngineConfig, data: Dict[str, Any]) -> EngineConfig:
    return replace(
        config,
        enrichment_enabled=_as_bool(data.get("enrichment_enabled"), config.enrichment_enabled),
        enrichment_timeout_seconds=_as_float(
            data.get("enrichment_timeout_seconds"), config.enrichment_timeout_seconds
        ),
        enrichment_providers=_as_names(data.get("enrichment_providers"), config.enrichment_providers),
        openai_model=str(data.get("openai_model") or config.openai_model),
        hf_api_url=str(data.get("hf_api_url") or config.hf_api_url),
        product_lookup_timeout_seconds=_as_float(
            data.get("product_lookup_timeout_seconds"), config.product_lookup_timeout_seconds
        ),
        product_cache_ttl_seconds=_as_int(
            data.get("product_cache_ttl_seconds"), config.product_cache_ttl_seconds
        ),
        patients_file=str(data.get("patients_file") or config.patients_file),
    )


# Environment variable -> config key. Environment wins over the JSON file.
ENV_OVERRIDES = {
    "ENRICHMENT_ENABLED": "enrichment_enabled",
    "ENRICHMENT_TIMEOUT_SECONDS": "enrichment_timeout_seconds",
    "ENRICHMENT_PROVIDERS": "enrichment_providers",
    "OPENAI_MODEL": "openai_model",
    "HF_API_URL": "hf_api_url",
    "PRODUCT_LOOKUP_TIMEOUT_SECONDS": "product_lookup_timeout_seconds",
    "PRODUCT_CACHE_TTL_SECONDS": "product_cache_ttl_seconds",
    "PATIENTS_FILE": "patients_file",
}


def load_engine_config(path: Optional[Path] = None) -> EngineConfig:
    config = _apply(EngineConfig(), _read_file(path or _config_path()))

    env_data = {
        key: os.environ[env_name]
        for env_name, key in ENV_OVERRIDES.items()
        if os.environ.get(env_name)
    }
    if env_data:
        config = _apply(config, env_data)

    if config.enrichment_timeout_seconds <= 0:
        logger.warning("Non-positive enrichment timeout configured; using default")
        config = replace(config, enrichment_timeout_seconds=EngineConfig.enrichment_timeout_seconds)
    return config
