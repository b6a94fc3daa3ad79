"""Constants shared across the server update modules."""

from __future__ import annotations

LATEST_VERSION = "default"

DEFAULT_OUTPUT_FILE = "server.jar"
DEFAULT_CHECKSUM_FILE = "checksum.txt"

CHECKSUM_SEPARATOR = "||"
JOB_SEPARATOR = "_"
INVALID_ARTIFACT = "INVALID"

PAPER_API_URL = "https://api.papermc.io/v2/projects"
PURPUR_API_URL = "https://api.purpurmc.org/v2/purpur"
BUNGEECORD_JENKINS_URL = "https://ci.md-5.net/"
PUFFERFISH_JENKINS_URL = "https://ci.pufferfish.host/"
