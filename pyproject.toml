[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "drinkctl"
version = "0.1.0"
description = "Controller for a drink-mixing machine: recipe database, order queue, admin TCP service and client."
requires-python = ">=3.10"
dependencies = []
keywords = ["drinks", "cocktail", "sqlite", "tcp", "controller", "home-automation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
drinkctl = "drinkctl.app:main"
drinkctl-responder = "drinkctl.responder:main"

[tool.hatch.build.targets.wheel]
packages = ["drinkctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
