[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pwdplay"
version = "0.1.0"
description = "Building blocks for a browser-based container playground: events, configuration, signed cookies, container request helpers and websocket messaging"
requires-python = ">=3.10"
keywords = ["playground", "containers", "docker", "websocket", "sessions", "cookies"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pwdplay-genheader = "pwdplay.genheader:main"

[tool.hatch.build.targets.wheel]
packages = ["pwdplay"]

[tool.hatch.build.targets.sdist]
include = ["pwdplay", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
