[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "apiflow"
version = "0.1.0"
description = "Building blocks for HTTP APIs: request contexts, content formats, middleware chains, routing, cookies, casing and conditional requests"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "api", "router", "middleware", "conditional-requests", "cookies", "casing"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["apiflow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
