[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "helen"
version = "0.1.0"
description = "Lobby formats and settings, players, bans, chat, game servers and an admin log for a team game matchmaking backend"
requires-python = ">=3.10"
dependencies = []
keywords = ["matchmaking", "lobby", "game-server", "chat", "bans", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["helen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
