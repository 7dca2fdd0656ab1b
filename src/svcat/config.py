"""
Runtime settings for the service catalog, read from the environment.
"""
import os
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


class CriticalityMode(str, Enum):
    """
    How critical impact is decided.

    TRANSITIVE: every edge on the path to the changed service must be required.
    LOCAL: only the edge that discovered the impacted service is inspected.
    """
    TRANSITIVE = "transitive"
    LOCAL = "local"


class CatalogSettings(BaseModel):
    """
    Settings shared by the registry, the orchestrator and the CLI.
    """
    config_dir: str = "./config"
    log_level: str = "WARNING"
    criticality: CriticalityMode = CriticalityMode.TRANSITIVE
    strict_cycles: bool = False
    schema_version: str = "1.0.0"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "CatalogSettings":
        """
        Builds settings from SVCAT_* environment variables, loading a .env file first.

        :param dotenv_path: Optional explicit .env file. Defaults to searching upwards from cwd.
        :return: Populated settings.
        """
        load_dotenv(dotenv_path)
        values = {}
        for field in cls.model_fields:
            raw = os.environ.get(f"SVCAT_{field.upper()}")
            if raw is not None and raw != "":
                values[field] = raw
        if "strict_cycles" in values:
            values["strict_cycles"] = values["strict_cycles"].lower() in ("1", "true", "yes", "on")
        if "criticality" in values:
            values["criticality"] = values["criticality"].lower()
        return cls(**values)
