import os

# External EnergyPlus simulation service
SIMULATION_API_URL = os.environ.get("SIMULATION_API_URL", "http://localhost:8000").rstrip("/")
SIMULATION_API_TIMEOUT = float(os.environ.get("SIMULATION_API_TIMEOUT", "600"))
SIMULATION_API_STATUS_TIMEOUT = float(os.environ.get("SIMULATION_API_STATUS_TIMEOUT", "10"))
BATCH_MAX_WORKERS = int(os.environ.get("BATCH_MAX_WORKERS", "8"))

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./energysim.db")

# Hosted auth provider (GoTrue-compatible REST API)
AUTH_URL = os.environ.get("AUTH_URL", "http://localhost:54321").rstrip("/")
AUTH_API_KEY = os.environ.get("AUTH_API_KEY", "")
AUTH_TIMEOUT = float(os.environ.get("AUTH_TIMEOUT", "20"))

# Comma-separated, e.g. FRONTEND_ORIGINS="http://localhost:3000,http://10.5.0.2:3000"
FRONTEND_ORIGINS = os.environ.get("FRONTEND_ORIGINS", "http://localhost:3000,http://localhost:8000")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# 0 disables the background status monitor
MONITOR_INTERVAL_MINUTES = int(os.environ.get("MONITOR_INTERVAL_MINUTES", "0"))
