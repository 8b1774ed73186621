"""Process exit codes for the drive-audit command line."""

# Command completed successfully
SUCCESS = 0

# Missing or invalid configuration
CONFIG_ERROR = 1

# Credential loading or token exchange failed
AUTH_ERROR = 2

# A Google Drive API call failed
API_ERROR = 3

# Anything else, including report write failures and cancellation
INTERNAL_ERROR = 10
