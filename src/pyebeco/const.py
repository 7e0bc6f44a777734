"""Constants for pyebeco library."""

from __future__ import annotations


# API Configuration
DEFAULT_BASE_URL = "https://ebecoconnect.com"
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_TOKEN_LIFETIME_SECONDS = 84600

# Headers sent with every request
TENANT_HEADER = "Abp.TenantId"
TENANT_ID = "1"

# Endpoints
LOGIN_ENDPOINT = "/api/TokenAuth/Authenticate"
GET_USER_DEVICES_ENDPOINT = "/api/services/app/Devices/GetUserDevices"
UPDATE_USER_DEVICE_ENDPOINT = "/api/services/app/Devices/UpdateUserDevice"

# Polling
DEFAULT_POLL_INTERVAL_MS = 10000

TWO_FACTOR_REQUIRED_MESSAGE = "Account requires two factor authentication"
MISSING_CREDENTIALS_MESSAGE = 'Not all required configuration values found. Need "username" and "password".'

# Target temperature precision (decimal places)
TEMPERATURE_PRECISION = 1
