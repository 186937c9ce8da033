import os
from dataclasses import dataclass


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    token: str
    data_path: str = "starknet_gate_data.json"
    host: str = "127.0.0.1"
    port: int = 8000
    # Seconds before the expired / not found notices send the user home
    redirect_delay: int = 5
    # Set to False to skip syncing slash commands at startup
    sync_commands: bool = True
    log_level: str = "INFO"


def load_settings() -> Settings:
    token = os.getenv("DISCORD_BOT_TOKEN", "").strip()
    return Settings(
        token=token or "",
        data_path=os.getenv("STARKNET_GATE_DATA", "starknet_gate_data.json"),
        host=os.getenv("STARKNET_GATE_HOST", "127.0.0.1"),
        port=int(os.getenv("STARKNET_GATE_PORT", "8000")),
        redirect_delay=int(os.getenv("STARKNET_GATE_REDIRECT_DELAY", "5")),
        sync_commands=_flag("STARKNET_GATE_SYNC_COMMANDS", "1"),
        log_level=os.getenv("STARKNET_GATE_LOG_LEVEL", "INFO"),
    )
