CONFIG_FILENAME = "world_reset_config.json"

APP_NAME = "WorldResetter"
APP_VERSION = "1.1.0"

SERVER_PROPERTIES_FILE = "server.properties"
RESTART_SCRIPT_NAME = "restart_server.sh"

# World naming
DEFAULT_WORLD_NAME = "world"
DEFAULT_WORLD_NAMES = ("world", "world_nether", "world_the_end")
WORLD_NAME_PREFIX = "world_"
NETHER_SUFFIX = "_nether"
END_SUFFIX = "_the_end"
WORLD_ID_MODULUS = 100000

# Properties keys touched by a reset
LEVEL_SEED_KEY = "level-seed"
LEVEL_NAME_KEY = "level-name"

# Logs
LOGS_DIR = "logs"
WORLD_RESET_LOG_PREFIX = "world_reset_"
OUTPUT_LOG_NAME = "world_reset_output.log"

# Timing (seconds)
SERVER_SHUTDOWN_DELAY = 3
PROCESS_CLEANUP_DELAY = 8
GRACEFUL_SHUTDOWN_TIMEOUT = 15
FORCE_KILL_DELAY = 3
VERIFICATION_DELAY = 3

# Launch
JVM_MIN_MEMORY = "16G"
JVM_MAX_MEMORY = "16G"
SCREEN_SESSION_NAME = "minecraft_minigames"
JAVA_EXECUTABLE = "java"
SCRIPT_SHELL = "/bin/bash"

ADMIN_PERMISSION = "worldresetter.admin"

# Cleanup targets
CACHE_FILES = (
    "usercache.json",
    "whitelist.json",
    "banned-players.json",
    "banned-ips.json",
    "session.lock",
)

CACHE_DIRECTORIES = (
    "cache",
    "logs",
    "versions",
    ".paper-remapped",
)

WORLD_DATA_PATTERNS = (
    "level.dat*",
    "uid.dat",
)


class Messages:
    NO_PERMISSION = "You don't have permission to use this command!"
    RESET_WARNING = "WARNING: This will delete ALL worlds and restart the server!"
    RESET_CONFIRMATION = "This action cannot be undone! All player progress will be lost!"
    RESET_COMMAND_HINT = "Type /reset confirm to proceed with the world reset."
    RESET_INITIATED = "WORLD RESET INITIATED"
    RESET_BROADCAST = "All worlds are being deleted and the server will restart!"
    REJOIN_MESSAGE = "You can try rejoining in ~30 seconds..."
    INVALID_ARGUMENTS = "Invalid arguments. Use /reset or /reset confirm"
    RESET_FAILED = "World reset failed: {reason}"
