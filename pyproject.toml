[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arkmcp"
version = "0.1.0"
description = "Model Context Protocol server for browsing, searching and dumping the files of a project directory"
requires-python = ">=3.10"
keywords = ["mcp", "model-context-protocol", "json-rpc", "source-code", "arklite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
arkmcp = "arkmcp.mcp.server:main"

[tool.hatch.build.targets.wheel]
packages = ["arkmcp"]

[tool.pytest.ini_options]
addopts = "-ra"
