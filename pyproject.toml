[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "haquests"
version = "0.1.0"
description = "Low-level HTTP toolkit: raw-socket TCP, TLS, and hand-built HTTP requests including request smuggling payloads"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "http",
    "tcp",
    "raw-socket",
    "tls",
    "request-smuggling",
    "chunked",
    "security-testing",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: System :: Networking",
    "Topic :: Security",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
haquests = "haquests.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["haquests"]

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
