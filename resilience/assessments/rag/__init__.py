from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml

from resilience.assessments.rag.types import RagParameters

CONFIG_PATH = Path(__file__).with_name("config.yaml")


@lru_cache()
def load_config() -> RagParameters:
    with CONFIG_PATH.open("r", encoding="utf-8") as fh:
        raw: Dict[str, Any] = yaml.safe_load(fh)
    return RagParameters.from_raw(raw)
