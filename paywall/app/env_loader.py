"""Load environment variables early for the FastAPI app.

For local dev, loads a .env.dev file. In staging and prod, env vars are
injected by the deployment (configmaps and secrets), so no .env file is
loaded.
"""

import os
import sys
from typing import Literal
from dotenv import load_dotenv

EnvironmentName = Literal["dev", "staging", "prod"]

# Session tokens are signed with JWT_SECRET; the app refuses to start without it.
REQUIRED_ENV_VARS = [
    "JWT_SECRET",
]

# Without these the app still starts, in a degraded mode: reads return no data
# and writes or payments fail with a 500.
DEGRADABLE_ENV_VARS = [
    "DATABASE_URL",
    "MERCADO_PAGO_ACCESS_TOKEN",
]


def validate_required_env_vars() -> None:
    """Validate that all required environment variables are set.

    Raises:
        SystemExit: If any required environment variables are missing.
    """
    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        print(
            f"ERROR: Missing required environment variables: {', '.join(missing)}",
            file=sys.stderr,
        )
        print(
            "Please set these variables in your .env file or environment.",
            file=sys.stderr,
        )
        sys.exit(1)


def warn_degraded_env_vars() -> list[str]:
    """Warn about unset variables that put the app in degraded mode.

    Returns:
        The names of the unset variables.
    """
    unset = [var for var in DEGRADABLE_ENV_VARS if not os.getenv(var)]
    for var in unset:
        print(f"WARNING: {var} is not set; running in degraded mode", file=sys.stderr)
    return unset


env = os.getenv("ENV", "dev")
if env in ("staging", "prod"):
    print(f"Running in {env} environment (env vars from configmaps/secrets)")
elif env == "dev":
    print("Loading environment variables from .env.dev")
    load_dotenv(".env.dev")
else:
    raise ValueError(f"Invalid ENV value: {env}. Must be 'dev', 'staging', or 'prod'.")

validate_required_env_vars()
warn_degraded_env_vars()


def get_current_environment() -> EnvironmentName:
    """Get the current environment (dev, staging, or prod)."""
    env = os.getenv("ENV", "dev")
    if env in ("dev", "staging", "prod"):
        return env  # type: ignore[return-value]
    raise ValueError(f"Invalid ENV value: {env}. Must be 'dev', 'staging', or 'prod'.")
