[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iotaweb"
version = "0.1.0"
description = "Request routing and file serving for a small device web server, with a URL splitter and device constants"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "web server", "url", "file server", "routing"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["iotaweb"]

[tool.pytest.ini_options]
addopts = "-ra"
