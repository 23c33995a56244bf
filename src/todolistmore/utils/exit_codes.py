"""Exit codes for the command-line surface."""

SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Record not found
ERROR_NOT_FOUND = 5

# Storage engine failure
ERROR_PERSISTENCE = 7

# No store location could be opened
ERROR_STORE_UNAVAILABLE = 8
