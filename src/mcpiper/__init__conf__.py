"""Distribution metadata shared by the CLI and packaging checks."""

from __future__ import annotations

name = "mcpiper"
title = "Live colourised trace viewer for memcache request/response streams"
version = "0.1.0"
shell_command = "mcpiper"
