"""Filesystem paths used by configuration lookup."""

import platformdirs

app_dir = platformdirs.user_config_path("shellexec")
