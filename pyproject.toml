[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbcms"
version = "0.1.0"
description = "Building blocks for a GB/T 28181 video platform: SDP, MANSCDP XML messages, stream and sink registries, Redis helpers"
requires-python = ">=3.10"
keywords = ["gb28181", "sip", "sdp", "manscdp", "video", "surveillance", "redis"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Telephony",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "redis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gbcms"]

[tool.pytest.ini_options]
addopts = "-ra"
