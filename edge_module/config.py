from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    mqtt_host: str
    mqtt_port: int
    mqtt_username: Optional[str]
    mqtt_password: Optional[str]

    module_id: str
    input_topic: str
    output_topic: str
    desired_topic: str
    reported_topic: str

    actuation_timeout_seconds: float
    desired_fetch_timeout_seconds: float

    log_level: str


def get_settings(env_file: Optional[str] = None) -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = env_file or os.getenv("EDGE_ENV_FILE", ".env")
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    module_id = os.getenv("EDGE_MODULE_ID", "filter-module")
    base = f"edge/{module_id}"

    return Settings(
        mqtt_host=os.getenv("MQTT_BROKER_HOST", "localhost"),
        mqtt_port=int(os.getenv("MQTT_BROKER_PORT", "1883")),
        mqtt_username=os.getenv("MQTT_USERNAME"),
        mqtt_password=os.getenv("MQTT_PASSWORD"),
        module_id=module_id,
        input_topic=os.getenv("EDGE_INPUT_TOPIC", f"{base}/input1"),
        output_topic=os.getenv("EDGE_OUTPUT_TOPIC", f"{base}/output1"),
        desired_topic=os.getenv("EDGE_DESIRED_TOPIC", f"{base}/config/desired"),
        reported_topic=os.getenv("EDGE_REPORTED_TOPIC", f"{base}/config/reported"),
        actuation_timeout_seconds=float(os.getenv("ACTUATION_TIMEOUT_SECONDS", "5")),
        desired_fetch_timeout_seconds=float(os.getenv("DESIRED_FETCH_TIMEOUT_SECONDS", "5")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
