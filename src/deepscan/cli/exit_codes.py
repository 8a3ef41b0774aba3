"""Process exit codes of the deepscan CLI."""

EXIT_SUCCESS = 0
# Violations found and --fail-on-violations given
EXIT_ISSUES_FOUND = 1
# Unexpected error while running a scan
EXIT_SCANNER_ERROR = 2
EXIT_INVALID_USAGE = 3
# git, docker or the docker daemon is unavailable
EXIT_BOOTSTRAP_FAILURE = 4
